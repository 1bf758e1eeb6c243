"""Tests for the profile API."""

from uuid import uuid4

from tests.fixtures.auth_fixtures import make_user_token


def test_rotate_qr_slug(client, db, auth_headers, setup_profile):
    old_slug = setup_profile.qr_slug
    resp = client.post("/profiles/me/qr-slug", headers=auth_headers(setup_profile))
    assert resp.status_code == 200
    body = resp.json()
    assert body["newSlug"] != old_slug
    assert body["joinUrl"] == f"http://localhost:8080/join/{body['newSlug']}"

    start = client.post(
        "/guest-chats",
        json={"slug": old_slug, "name": "Alex", "preferredLanguage": "fr"},
    )
    assert start.status_code == 400


def test_rotate_qr_slug_unknown_user(client, auth_headers):
    resp = client.post("/profiles/me/qr-slug", headers=auth_headers(make_user_token(uuid4())))
    assert resp.status_code == 401


def test_rotate_qr_slug_requires_auth(client):
    assert client.post("/profiles/me/qr-slug").status_code == 401

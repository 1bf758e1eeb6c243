"""
Error taxonomy for chat, translation and guest flows.

Services and commands raise these; the handlers registered in app.main render
them as {"error": <code>, "message": <safe message>} with the class status.
"""

from __future__ import annotations

from typing import Optional


class ChatServiceError(Exception):
    status_code: int = 500
    error: str = "server_error"
    default_message: str = "Internal error"

    def __init__(
        self, message: Optional[str] = None, *, status_code: Optional[int] = None
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInput(ChatServiceError):
    status_code = 400
    error = "invalid_input"
    default_message = "Invalid input"


class Unauthorized(ChatServiceError):
    status_code = 401
    error = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(ChatServiceError):
    status_code = 403
    error = "forbidden"
    default_message = "Forbidden"


class NotFound(ChatServiceError):
    status_code = 404
    error = "not_found"
    default_message = "Not found"


class NotFoundOrExpired(ChatServiceError):
    status_code = 410
    error = "invalid_or_expired"
    default_message = "Invalid or expired"


class InviteNotFound(NotFoundOrExpired):
    status_code = 404
    default_message = "Token not found or invalid"


class InviteExpired(NotFoundOrExpired):
    default_message = "Token has expired"


class InviteExhausted(NotFoundOrExpired):
    default_message = "Token has reached maximum uses"


class SlugNotFound(NotFoundOrExpired):
    status_code = 400
    default_message = "Invalid or expired QR code"


class RateLimited(ChatServiceError):
    status_code = 429
    error = "rate_limit_exceeded"
    default_message = "Rate limit exceeded"

    def __init__(self, message: Optional[str] = None, *, retry_after: int = 60) -> None:
        super().__init__(message)
        self.retry_after = max(1, int(retry_after))


class DependencyFailure(ChatServiceError):
    status_code = 500
    error = "server_error"
    default_message = "Internal error"


class TranslationFailed(DependencyFailure):
    default_message = "Translation provider failed"


class CredentialSigningUnavailable(DependencyFailure):
    default_message = "Guest credentials are not available"


class Exhausted(ChatServiceError):
    status_code = 500
    error = "exhausted"
    default_message = "Gave up after repeated attempts"


class SlugGenerationExhausted(Exhausted):
    default_message = "Failed to generate unique slug after multiple attempts"

from app.realtime.relay import ChangeRelay, Subscription, get_change_relay

__all__ = ["ChangeRelay", "Subscription", "get_change_relay"]

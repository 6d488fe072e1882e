from remitwise.auth.session import Session, create_session_token, get_session

__all__ = [
    "Session",
    "create_session_token",
    "get_session",
]

"""Health-check message for the ping endpoint."""


def get_ping_message() -> str:
    """Return the liveness reply."""
    return "pong"

from typing import Any, Optional


def envelope(message: str, data: Any = None, pagination: Optional[dict] = None) -> dict:
    """Success body shared by every endpoint."""
    body = {"status": True, "message": message, "data": data}
    if pagination is not None:
        body["pagination"] = pagination
    return body

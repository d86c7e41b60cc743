"""JSON response helper shared by the API routers."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(payload: Any = None, status_code: int = 200) -> JSONResponse:
    """Build a JSON response from a payload and status code.

    Pydantic models are dumped with their aliases so import envelopes keep
    their camelCase keys.
    """
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(by_alias=True, mode="json")
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def error_response(
    error: str, status_code: int, message: str | None = None, **details: Any
) -> JSONResponse:
    """Build a failure response following the ``{error, message}`` convention."""
    payload: dict[str, Any] = {"error": error}
    if message is not None:
        payload["message"] = message
    payload.update(details)
    return api_response(payload, status_code)

"""Request validation gate and the single-message rendering of parse errors."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .errors import ValidationError
from .schemas import RequestDTO


def _is_empty(value: Any) -> bool:
    # bool is checked before int: False is a value, not an absent field
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, int):
        return value == 0
    return False


# PUBLIC_INTERFACE
def validate_required(dto: RequestDTO, fields: Optional[Iterable[str]] = None) -> None:
    """
    Reject a request body whose required fields are missing or empty.

    Args:
        dto: Parsed request body.
        fields: Fields to check; defaults to the DTO's own `required_fields`.

    Raises:
        ValidationError: naming the first failing field, e.g. "title is required".
    """
    for name in dto.required_fields if fields is None else fields:
        if _is_empty(getattr(dto, name, None)):
            raise ValidationError(f"{name} is required")


# PUBLIC_INTERFACE
def format_request_errors(errors: Iterable[dict]) -> str:
    """
    Collapse pydantic/FastAPI error details into a single message.

    Only the first error is reported, as "<field>: <reason>". The leading
    'body'/'path'/'query' location segment is dropped.
    """
    for err in errors:
        if err.get("type") == "json_invalid":
            return "invalid JSON body"
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in {"body", "path", "query", "header"}:
            loc = loc[1:]
        field = ".".join(loc)
        reason = err.get("msg", "invalid value")
        return f"{field}: {reason}" if field else reason
    return "invalid request"

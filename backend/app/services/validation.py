from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

import pydantic

from ..errors import ValidationError
from ..schemas import AppointmentCreate


def format_errors(errors: Iterable[Mapping[str, Any]]) -> List[str]:
    """Flatten pydantic error dicts into '"field" message' strings."""
    out: List[str] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "is invalid")
        out.append(f'"{field}" {msg}' if field else msg)
    return out


def validate_payload(payload: Union[AppointmentCreate, Mapping[str, Any]]) -> AppointmentCreate:
    if isinstance(payload, AppointmentCreate):
        return payload
    try:
        return AppointmentCreate.model_validate(payload)
    except pydantic.ValidationError as exc:
        messages = format_errors(exc.errors())
        raise ValidationError(", ".join(messages), errors=messages) from exc

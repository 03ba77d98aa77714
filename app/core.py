import json
import re
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import parse_qsl

from pydantic import BaseModel, ValidationError

from .exceptions import BadRequestError

# Request body decoding: classify the body once, then hand it to one of two
# pure decoders.

M = TypeVar("M", bound=BaseModel)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# optional sign, ASCII digits only: no whitespace, underscores or other scripts
_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not _INT_RE.fullmatch(raw):
        return None
    return int(raw)


class InputFormat(str, Enum):
    STRUCTURED = "structured"
    FORM = "form"


def classify_input(content_type: str) -> InputFormat:
    if FORM_CONTENT_TYPE in (content_type or "").lower():
        return InputFormat.FORM
    return InputFormat.STRUCTURED


def _validation_message(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def decode_structured(body: bytes, model: Type[M]) -> M:
    try:
        data = json.loads(body or b"null")
    except (ValueError, UnicodeDecodeError) as e:
        raise BadRequestError(f"invalid JSON body: {e}")
    if not isinstance(data, dict):
        raise BadRequestError("request body must be a JSON object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BadRequestError(_validation_message(e))


def decode_form(body: bytes, model: Type[M]) -> M:
    try:
        pairs = parse_qsl(body.decode("utf-8"), keep_blank_values=True)
    except UnicodeDecodeError as e:
        raise BadRequestError(f"invalid form body: {e}")
    raw: Dict[str, str] = dict(pairs)

    # integer fields that fail to parse become 0 instead of rejecting the form
    data: Dict[str, Any] = {}
    for name, field in model.model_fields.items():
        key = field.alias or name
        value = raw.get(key, raw.get(name))
        if value is None:
            continue
        if field.annotation is int:
            parsed = parse_int(value)
            data[key] = parsed if parsed is not None else 0
        else:
            data[key] = value
    return model.model_validate(data)


def decode_body(body: bytes, content_type: str, model: Type[M]) -> M:
    if classify_input(content_type) is InputFormat.FORM:
        return decode_form(body, model)
    return decode_structured(body, model)

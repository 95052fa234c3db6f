"""Request payload schemas.

Handlers call :func:`parse_payload`; pydantic errors come back out as a
field-keyed :class:`tasktrack.errors.ValidationError` (HTTP 422).
"""
from typing import Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tasktrack.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_payload(schema: Type[SchemaT], payload) -> SchemaT:
    if not isinstance(payload, dict):
        payload = {}
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_errors(exc)) from exc


def format_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        ctx = err.get("ctx") or {}
        if "field" in ctx:
            # cross-field checks report under the field they belong to
            field = str(ctx["field"])
        elif err["loc"]:
            field = str(err["loc"][0])
        else:
            field = "payload"
        errors.setdefault(field, []).append(_message(field, err, ctx))
    return errors


def _message(field: str, err: dict, ctx: dict) -> str:
    label = field.replace("_", " ")
    kind = err["type"]
    if kind == "missing":
        return f"The {label} field is required."
    if kind == "string_type":
        return f"The {label} field must be a string."
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"The {label} field is required."
        return f"The {label} field must be at least {ctx.get('min_length')} characters."
    if kind == "string_too_long":
        return f"The {label} field must not be greater than {ctx.get('max_length')} characters."
    if kind == "enum":
        return f"The selected {label} is invalid."
    if kind == "value_error":
        return str(ctx.get("error", err["msg"]))
    return err["msg"]

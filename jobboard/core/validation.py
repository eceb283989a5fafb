"""
Payload validation against declared field contracts.

A `PayloadSchema` lists, per field, the JSON type and constraints the field
must satisfy. It compiles to a strict pydantic model: "5" is not an integer,
1 is not a string, and fields the schema does not declare are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from .errors import BadRequestError

_TYPES: dict[str, type] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
}


class _StrictPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")


@dataclass(frozen=True)
class FieldRule:
    type: str
    required: bool = False
    nullable: bool = False
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    def annotation(self) -> Any:
        try:
            base = _TYPES[self.type]
        except KeyError:
            raise ValueError(f"Unsupported field type: {self.type!r}") from None

        constrained = Annotated[
            base,
            Field(
                ge=self.minimum,
                le=self.maximum,
                min_length=self.min_length,
                max_length=self.max_length,
                pattern=self.pattern,
            ),
        ]
        return Optional[constrained] if self.nullable else constrained


class PayloadSchema:
    def __init__(self, name: str, fields: Mapping[str, FieldRule]) -> None:
        self.name = name
        self.fields = dict(fields)
        definitions: dict[str, Any] = {
            # Optional fields default to None without validating the default,
            # so an explicit null is still checked against `nullable`.
            key: (rule.annotation(), ... if rule.required else None)
            for key, rule in self.fields.items()
        }
        self.model = create_model(name, __base__=_StrictPayload, **definitions)

    def __repr__(self) -> str:
        return f"PayloadSchema({self.name!r}, fields={sorted(self.fields)})"


def _format_error(error: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ())) or "payload"
    return f"{loc}: {error.get('msg', 'invalid value')}"


def validate(payload: Any, schema: PayloadSchema) -> list[str]:
    """
    Return every violation of `schema` in `payload` (empty list when valid).
    """
    try:
        schema.model.model_validate(payload)
    except ValidationError as exc:
        return [_format_error(e) for e in exc.errors()]
    return []


def ensure_valid(payload: Any, schema: PayloadSchema) -> dict[str, Any]:
    errors = validate(payload, schema)
    if errors:
        raise BadRequestError("; ".join(errors), errors=errors)
    return dict(payload)

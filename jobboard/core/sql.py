"""
Builders for the dynamic parts of raw SQL statements.

Both builders return a `SqlFragment`: clause text that only ever contains
quoted, known column names and `$n` placeholders, plus the values bound to
those placeholders, in placeholder order. Callers that bind more values
after a fragment continue numbering at `fragment.next_placeholder`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from .errors import BadRequestError


@dataclass(frozen=True)
class SqlFragment:
    text: str = ""
    values: tuple[Any, ...] = field(default_factory=tuple)

    @property
    def placeholder_count(self) -> int:
        return len(self.values)

    @property
    def next_placeholder(self) -> int:
        return len(self.values) + 1


class Comparison(enum.Enum):
    EXACT = "exact"
    ICONTAINS = "icontains"
    AT_LEAST = "at_least"
    AT_MOST = "at_most"
    NONZERO = "nonzero"


@dataclass(frozen=True)
class FilterRule:
    column: str
    comparison: Comparison
    value_type: type = str


def quote_ident(name: str) -> str:
    return '"' + str(name).replace('"', '""') + '"'


def escape_like(value: Any) -> str:
    r"""
    Make `%`, `_` and `\` match literally in a LIKE pattern (escape char `\`).
    """
    return str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sql_for_partial_update(data: Mapping[str, Any], column_names: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET part of an UPDATE from a partial payload.

    {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        -> '"first_name"=$1, "age"=$2', ("Aliya", 32)
    """
    if not data:
        raise BadRequestError("No data.")

    cols = []
    values = []
    for idx, (key, value) in enumerate(data.items(), start=1):
        cols.append(f"{quote_ident(column_names.get(key, key))}=${idx}")
        values.append(value)

    return SqlFragment(", ".join(cols), tuple(values))


@lru_cache(maxsize=None)
def _adapter(tp: type) -> TypeAdapter:
    return TypeAdapter(tp)


def coerce_filters(filters: Mapping[str, Any], rules: Mapping[str, FilterRule]) -> dict[str, Any]:
    """
    Check filter names against `rules` and convert values to the rule type.

    Query-string values arrive as text, so conversion is lax ("5000" -> 5000,
    "true" -> True). Every unknown name, and then every bad value, is
    reported in a single BadRequestError.
    """
    invalid = [key for key in filters if key not in rules]
    if invalid:
        raise BadRequestError(
            f"These filter parameters are invalid: [{', '.join(invalid)}]",
            errors=[f"{key}: unrecognized filter" for key in invalid],
        )

    coerced: dict[str, Any] = {}
    errors: list[str] = []
    for key, value in filters.items():
        try:
            coerced[key] = _adapter(rules[key].value_type).validate_python(value)
        except ValidationError as exc:
            errors.append(f"{key}: {exc.errors()[0]['msg']}")
    if errors:
        raise BadRequestError("; ".join(errors), errors=errors)
    return coerced


def sql_for_filters(filters: Mapping[str, Any], rules: Mapping[str, FilterRule]) -> SqlFragment:
    """
    Build the body of a WHERE clause (without the keyword) from filters.

    Conditions are joined with AND; no filters gives an empty fragment.
    """
    filters = coerce_filters(filters, rules)

    clauses = []
    values: list[Any] = []
    for key, value in filters.items():
        rule = rules[key]
        column = quote_ident(rule.column)
        idx = len(values) + 1
        if rule.comparison is Comparison.ICONTAINS:
            clauses.append(f"{column} ILIKE ${idx} ESCAPE '\\'")
            values.append(f"%{escape_like(value)}%")
        elif rule.comparison is Comparison.AT_LEAST:
            clauses.append(f"{column} >= ${idx}")
            values.append(value)
        elif rule.comparison is Comparison.AT_MOST:
            clauses.append(f"{column} <= ${idx}")
            values.append(value)
        elif rule.comparison is Comparison.NONZERO:
            # Both branches bind the literal zero.
            clauses.append(f"{column} {'>' if value else '='} ${idx}")
            values.append(0)
        else:
            clauses.append(f"{column} = ${idx}")
            values.append(value)

    return SqlFragment(" AND ".join(clauses), tuple(values))

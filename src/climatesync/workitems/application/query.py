"""WIQL query expression builder."""

from typing import Iterable, Sequence

from climatesync.workitems.domain.models import QueryCondition


def quote_field(field_name: str) -> str:
    return f"[{field_name}]"


def quote_literal(value: str) -> str:
    """Single-quote a string literal for use as a condition value."""
    return "'" + str(value).replace("'", "''") + "'"


def build_wiql(fields: Sequence[str], conditions: Iterable[QueryCondition]) -> str:
    """
    Build `Select [F1], [F2] From WorkItems Where [C] op v AND ...`.

    Condition values are inserted verbatim; use quote_literal for strings.
    Without conditions the Where clause is omitted.
    """
    field_set = ", ".join(quote_field(name) for name in fields)
    condition_set = " AND ".join(
        f"{quote_field(c.field_name)} {c.operator} {c.value}" for c in conditions
    )
    query = f"Select {field_set} From WorkItems"
    if condition_set:
        query += f" Where {condition_set}"
    return query

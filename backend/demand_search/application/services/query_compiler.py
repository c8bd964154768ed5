"""Query compiler — turns ordered criteria into the backend query grammar.

Grammar::

    token:value ( (AND|OR) token:value )*

Values without any of ``. * %`` get an implicit substring match
(``*value*``). Values holding whitespace, ``:`` or ``"`` are then
double-quoted, with inner quotes escaped as ``\\"``.
"""

import re
from collections.abc import Iterable, Mapping

from demand_search.domain.entities import BoolOperator, Criterion

_WILDCARD_CHARS = re.compile(r"[.*%]")
_NEEDS_QUOTES = re.compile(r"[\s:\"]")


def parse_operator(operator: BoolOperator | str | None) -> BoolOperator:
    """Accept an operator enum or its case-insensitive name; None means AND."""
    if isinstance(operator, BoolOperator):
        return operator
    return BoolOperator((operator or "AND").strip().upper())


def format_value(value: str) -> str:
    """Wildcard-wrap then quote a single (already trimmed) value."""
    if not _WILDCARD_CHARS.search(value):
        value = f"*{value}*"
    if _NEEDS_QUOTES.search(value):
        value = '"' + value.replace('"', '\\"') + '"'
    return value


def compile_query(criteria: Iterable[Criterion]) -> str | None:
    """Compile criteria left to right; None when nothing survives trimming.

    Blank values are dropped silently. The operator of the first surviving
    criterion is ignored; any later criterion without one joins with AND.
    """
    parts: list[str] = []
    for criterion in criteria:
        value = (criterion.value or "").strip()
        if not value:
            continue
        if parts:
            parts.append(parse_operator(criterion.operator).value)
        parts.append(f"{criterion.field}:{format_value(value)}")
    return " ".join(parts) or None


def combine_fields(values: Mapping[str, str | None]) -> str | None:
    """AND together ``token -> value`` pairs from a multi-field search form."""
    return compile_query(
        Criterion(field=token, value=value or "", operator=BoolOperator.AND)
        for token, value in values.items()
    )

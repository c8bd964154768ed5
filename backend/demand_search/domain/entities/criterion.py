"""Domain entities for composing backend search queries."""

from dataclasses import dataclass
from enum import Enum


class Domain(str, Enum):
    """Master entity whose attributes a query can filter on."""

    PRODUCT = "product"
    CHANNEL = "channel"
    LOCATION = "location"


class BoolOperator(str, Enum):
    """Operator placed before the criterion it introduces."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class Criterion:
    """A single field/value/operator filter unit.

    ``field`` is a backend token (e.g. ``businessunit``). ``operator`` is
    ignored for the first criterion of a sequence and defaults to AND for
    every other one.
    """

    field: str
    value: str
    operator: BoolOperator | None = None

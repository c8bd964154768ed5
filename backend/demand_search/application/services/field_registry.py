"""Domain field registry — maps UI field names to backend search tokens.

The master tables share a ``Level`` column. The search backend cannot tell
those apart, so ``level`` resolves to a domain-prefixed token
(``productlevel``, ``channellevel``, ``locationlevel``).
"""

from dataclasses import dataclass

from demand_search.domain.entities import Domain


@dataclass(frozen=True)
class FieldSpec:
    """One searchable attribute of a master entity."""

    domain: Domain
    ui_name: str
    token: str
    label: str
    attribute: str  # master row attribute holding the values


FIELD_REGISTRY: tuple[FieldSpec, ...] = (
    # Product
    FieldSpec(Domain.PRODUCT, "productid", "productid", "Product ID", "product_id"),
    FieldSpec(Domain.PRODUCT, "productdescr", "productdescr", "Product Description", "product_descr"),
    FieldSpec(Domain.PRODUCT, "businessunit", "businessunit", "Business Unit", "business_unit"),
    FieldSpec(
        Domain.PRODUCT,
        "isdailyforecastrequired",
        "isdailyforecastrequired",
        "Is Daily Forecast Required",
        "is_daily_forecast_required",
    ),
    FieldSpec(Domain.PRODUCT, "isnew", "isnew", "Is New", "is_new"),
    FieldSpec(Domain.PRODUCT, "productfamily", "productfamily", "Product Family", "product_family"),
    FieldSpec(Domain.PRODUCT, "level", "productlevel", "Product Level", "level"),
    # Channel
    FieldSpec(Domain.CHANNEL, "channelid", "channelid", "Channel ID", "channel_id"),
    FieldSpec(Domain.CHANNEL, "channeldescr", "channeldescr", "Channel Description", "channel_descr"),
    FieldSpec(Domain.CHANNEL, "level", "channellevel", "Channel Level", "level"),
    # Location
    FieldSpec(Domain.LOCATION, "locationid", "locationid", "Location ID", "location_id"),
    FieldSpec(Domain.LOCATION, "locationdescr", "locationdescr", "Location Description", "location_descr"),
    FieldSpec(Domain.LOCATION, "level", "locationlevel", "Location Level", "level"),
    FieldSpec(Domain.LOCATION, "geography", "geography", "Geography", "geography"),
)

_BY_UI_NAME: dict[tuple[Domain, str], FieldSpec] = {
    (spec.domain, spec.ui_name): spec for spec in FIELD_REGISTRY
}
_BY_TOKEN: dict[str, FieldSpec] = {spec.token: spec for spec in FIELD_REGISTRY}


def _normalize(name: str) -> str:
    # UI column names arrive as "ProductID", "Level", "product_descr", ...
    return (name or "").strip().lower().replace("_", "")


def resolve(domain: Domain | str, ui_field: str) -> str | None:
    """Return the backend token for a UI field, or None when not registered."""
    try:
        domain = Domain(domain)
    except ValueError:
        return None
    spec = _BY_UI_NAME.get((domain, _normalize(ui_field)))
    return spec.token if spec else None


def fields_for(domain: Domain | str) -> list[FieldSpec]:
    """All registered fields of a domain, in registry order."""
    domain = Domain(domain)
    return [spec for spec in FIELD_REGISTRY if spec.domain is domain]


def tokens_for(domain: Domain | str) -> list[str]:
    """All backend tokens registered for a domain."""
    return [spec.token for spec in fields_for(domain)]


def field_for_token(token: str) -> FieldSpec | None:
    """Look up a field by its backend token (any domain)."""
    return _BY_TOKEN.get(_normalize(token))

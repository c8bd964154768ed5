"""Saved-query validator — is a stored query meaningful for a given screen?"""

from demand_search.domain.entities import Domain

from .field_registry import tokens_for


def is_applicable(domain: Domain | str, query: str | None) -> bool:
    """True when the query mentions at least one ``token:`` of the domain.

    The check is a case-insensitive substring match; the trailing colon
    keeps ``productid`` from matching inside unrelated text.
    """
    text = (query or "").lower()
    return any(f"{token}:" in text for token in tokens_for(domain))

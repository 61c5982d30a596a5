"""Aggregate lookup that reports a missing record as a NotFound rejection."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import NotFound


def load(aggregate_cls, identifier, reason: str | None = None):
    """Fetch an aggregate by id or raise NotFound with a stable reason."""
    name = aggregate_cls.__name__
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError as exc:
        raise NotFound(reason or f"{name.lower()}_not_found", f"{name} {identifier} not found") from exc

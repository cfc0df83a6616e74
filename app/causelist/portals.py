"""Registry of portal adapters keyed by canonical court identifier."""
from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional

from . import courts
from .errors import UnsupportedCourt
from .portal_aphc import AphcAdapter
from .portal_base import PortalAdapter
from .portal_tshc import TshcAdapter

AdapterFactory = Callable[[], PortalAdapter]

ADAPTERS: Dict[str, AdapterFactory] = {
    courts.ANDHRA_PRADESH: AphcAdapter,
    courts.TELANGANA: TshcAdapter,
}


def resolve_adapter(
    court: Optional[str],
    registry: Optional[Mapping[str, AdapterFactory]] = None,
) -> PortalAdapter:
    """Return a fresh adapter for ``court`` or raise ``UnsupportedCourt``."""

    registry = ADAPTERS if registry is None else registry
    canonical = courts.normalize_court(court)
    factory = registry.get(canonical) if canonical else None
    if factory is None:
        raise UnsupportedCourt(court)
    return factory()


def registered_courts() -> list[str]:
    return sorted(ADAPTERS)


__all__ = ["ADAPTERS", "resolve_adapter", "registered_courts"]

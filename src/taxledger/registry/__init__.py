"""Registry — реестры площадок и исключений из комиссии."""

from .exclusion_registry import ExclusionRegistry
from .venue_registry import VenueRegistry

__all__ = [
    "ExclusionRegistry",
    "VenueRegistry",
]

"""Service catalog package."""

from subtrack.catalog.services import (
    POPULAR_SERVICES,
    custom_service,
    filter_services,
    get_service,
)

__all__ = [
    "POPULAR_SERVICES",
    "custom_service",
    "filter_services",
    "get_service",
]

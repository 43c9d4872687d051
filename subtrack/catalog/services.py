"""
Predefined Service Catalog

The fixed list of well-known providers offered on the onboarding grid.
Ids are stable UUIDs so a selection made in one process means the same
thing in the next.

The last entry is the generic "Custom" template for anything not listed.
"""

from typing import Iterable, Optional
from uuid import UUID

from subtrack.models.subscription import Category, PredefinedService


def _service(
    id: str,
    name: str,
    icon_name: str,
    category: Category,
    is_custom: bool = False,
) -> PredefinedService:
    return PredefinedService(
        id=UUID(id),
        name=name,
        icon_name=icon_name,
        is_custom=is_custom,
        default_category=category,
    )


POPULAR_SERVICES: tuple[PredefinedService, ...] = (
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0001", "Netflix", "play.tv.fill", Category.ENTERTAINMENT),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0002", "Spotify", "music.note", Category.MUSIC),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0003", "Disney+", "sparkles.tv.fill", Category.ENTERTAINMENT),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0004", "Prime Video", "shippingbox.fill", Category.ENTERTAINMENT),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0005", "YouTube Premium", "play.rectangle.fill", Category.ENTERTAINMENT),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0006", "Apple Music", "music.quarternote.3", Category.MUSIC),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0007", "iCloud+", "icloud.fill", Category.PRODUCTIVITY),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0008", "Microsoft 365", "doc.text.fill", Category.PRODUCTIVITY),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c0009", "Adobe Creative Cloud", "paintbrush.fill", Category.PRODUCTIVITY),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c000a", "The New York Times", "newspaper.fill", Category.NEWS),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c000b", "Xbox Game Pass", "gamecontroller.fill", Category.GAMING),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c000c", "PlayStation Plus", "playstation.logo", Category.GAMING),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c000d", "Strava", "figure.run", Category.FITNESS),
    _service("0b6f9a8e-1c1e-4f43-9a55-0d1f2b7c000e", "Custom", "plus.circle.fill", Category.OTHER, is_custom=True),
)

_BY_ID = {service.id: service for service in POPULAR_SERVICES}


def get_service(service_id: UUID) -> Optional[PredefinedService]:
    """Look a service up by id, None if it is not in the catalog."""
    return _BY_ID.get(service_id)


def custom_service() -> PredefinedService:
    """The catalog's template for user-defined subscriptions."""
    return next(service for service in POPULAR_SERVICES if service.is_custom)


def filter_services(
    service_ids: Iterable[UUID],
    catalog: Iterable[PredefinedService] = POPULAR_SERVICES,
) -> tuple[PredefinedService, ...]:
    """Catalog entries whose id is in service_ids, in catalog order."""
    wanted = set(service_ids)
    return tuple(service for service in catalog if service.id in wanted)

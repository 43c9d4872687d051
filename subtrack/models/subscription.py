"""
Core Data Models for SubTrack

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Round-trip through storage with identical field names (including ids)

DESIGN DECISION: We use Pydantic v2 for persisted records and for the
read-only view models handed to the presentation layer.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Largest accepted charge per payment cycle
MAX_COST = Decimal("1000000000")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentCycle(str, Enum):
    """How often a subscription is charged."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class Category(str, Enum):
    """
    Supported subscription categories.

    DESIGN DECISION: Declaration order is meaningful. Category statistics
    with equal totals are reported in this order.
    """
    ENTERTAINMENT = "entertainment"
    MUSIC = "music"
    PRODUCTIVITY = "productivity"
    NEWS = "news"
    GAMING = "gaming"
    FITNESS = "fitness"
    OTHER = "other"

    @property
    def icon_name(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]


# Presentation hints only, the core never renders them
_CATEGORY_ICONS = {
    Category.ENTERTAINMENT: "tv.fill",
    Category.MUSIC: "music.note",
    Category.PRODUCTIVITY: "briefcase.fill",
    Category.NEWS: "newspaper.fill",
    Category.GAMING: "gamecontroller.fill",
    Category.FITNESS: "figure.run",
    Category.OTHER: "square.grid.2x2.fill",
}

_CATEGORY_COLORS = {
    Category.ENTERTAINMENT: "#FF3B30",
    Category.MUSIC: "#34C759",
    Category.PRODUCTIVITY: "#007AFF",
    Category.NEWS: "#FF9500",
    Category.GAMING: "#AF52DE",
    Category.FITNESS: "#FF2D55",
    Category.OTHER: "#8E8E93",
}


class StatisticsPeriod(str, Enum):
    """Period the statistics screen reports absolute figures in."""
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# CORE SUBSCRIPTION MODEL
# =============================================================================

class Subscription(BaseModel):
    """
    A recurring subscription owned by the subscription store.

    Subscriptions are never edited in place. The store replaces them
    wholesale or deletes them by id.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique subscription ID"
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name (e.g. 'Netflix Premium')"
    )
    cost: Decimal = Field(
        ...,
        ge=0,
        le=MAX_COST,
        description="Amount charged every payment cycle"
    )
    currency_code: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="Three letter currency code, not checked against ISO 4217"
    )
    renewal_date: date = Field(
        ...,
        description="Date of the next charge"
    )
    payment_cycle: PaymentCycle = Field(
        default=PaymentCycle.MONTHLY,
        description="How often the cost is charged"
    )
    category: Category = Field(
        default=Category.OTHER,
        description="Spending category"
    )
    is_custom: bool = Field(
        default=False,
        description="True when entered by hand rather than picked from the catalog"
    )

    @field_validator('currency_code')
    @classmethod
    def normalize_currency_code(cls, v: str) -> str:
        return v.upper()

    def days_until_renewal(self, today: Optional[date] = None) -> int:
        """Whole days from today to the renewal date (negative once it has passed)."""
        today = today or date.today()
        return (self.renewal_date - today).days


# =============================================================================
# CATALOG MODEL
# =============================================================================

class PredefinedService(BaseModel):
    """A well-known provider offered during onboarding."""
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str = Field(..., min_length=1)
    icon_name: str
    is_custom: bool = False
    default_category: Category = Category.OTHER


# =============================================================================
# STATISTICS VIEW MODELS
# =============================================================================

class CategoryStat(BaseModel):
    """
    Aggregated spend for one category.

    Derived on every query and never persisted.
    """
    model_config = ConfigDict(frozen=True)

    category: Category
    total_cost: float = Field(
        ...,
        ge=0,
        description="Monthly equivalent total (or yearly after period adjustment)"
    )
    transaction_count: int = Field(ge=0)
    percentage: float = Field(
        ...,
        ge=0,
        description="Share of total monthly spend, 0-100"
    )


class PieSlice(BaseModel):
    """Angular span of one category in the spending chart, in degrees."""
    model_config = ConfigDict(frozen=True)

    category: Category
    start_angle: float
    end_angle: float

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


class StatisticsReport(BaseModel):
    """
    Everything the statistics screen needs in one read-only object.

    When is_empty is True callers must show an explicit empty state
    rather than a chart with no slices.
    """
    model_config = ConfigDict(frozen=True)

    period: StatisticsPeriod
    total_expense: float = Field(ge=0)
    categories: list[CategoryStat] = Field(default_factory=list)
    slices: list[PieSlice] = Field(default_factory=list)
    top_category_percentage: Optional[int] = None
    active_subscriptions: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.active_subscriptions == 0

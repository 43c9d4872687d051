"""Cost normalization and spending statistics."""

from subtrack.statistics.engine import (
    build_report,
    category_statistics,
    period_adjusted,
    pie_slice_angles,
    top_category_percentage,
    total_expense,
    total_monthly_expense,
)
from subtrack.statistics.normalizer import (
    monthly_equivalent,
    subscription_monthly_cost,
)

__all__ = [
    "build_report",
    "category_statistics",
    "monthly_equivalent",
    "period_adjusted",
    "pie_slice_angles",
    "subscription_monthly_cost",
    "top_category_percentage",
    "total_expense",
    "total_monthly_expense",
]

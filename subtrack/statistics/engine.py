"""
Statistics Engine

DESIGN DECISION: Statistics are DERIVED, never stored.
Every call walks the current subscription list and rebuilds the figures,
so a mutation in the store is visible on the very next read.

All figures are nominal: amounts in different currencies are summed
as-is, there is no conversion.

TIE-BREAK: categories are grouped in Category declaration order and
sorted with a stable sort, so categories with equal totals keep that
order.
"""

from typing import Iterable, Optional

from subtrack.models.subscription import (
    Category,
    CategoryStat,
    PieSlice,
    StatisticsPeriod,
    StatisticsReport,
    Subscription,
)
from subtrack.statistics.normalizer import subscription_monthly_cost


MONTHS_PER_YEAR = 12

# The chart starts at the top of the circle
CHART_START_ANGLE = -90.0
DEGREES_PER_PERCENT = 3.6


def total_monthly_expense(subscriptions: Iterable[Subscription]) -> float:
    """Sum of monthly equivalents, 0.0 for no subscriptions."""
    return sum((subscription_monthly_cost(sub) for sub in subscriptions), 0.0)


def total_expense(
    subscriptions: Iterable[Subscription],
    period: StatisticsPeriod = StatisticsPeriod.MONTHLY,
) -> float:
    """Total spend expressed per month or per year."""
    total = total_monthly_expense(subscriptions)
    if period == StatisticsPeriod.YEARLY:
        return total * MONTHS_PER_YEAR
    return total


def category_statistics(subscriptions: Iterable[Subscription]) -> list[CategoryStat]:
    """
    Group subscriptions by category.

    Returns one CategoryStat per category that has subscriptions, sorted
    by monthly total, largest first. Percentages are shares of the overall
    monthly total and are 0 when that total is 0.
    """
    totals: dict[Category, float] = {}
    counts: dict[Category, int] = {}

    for sub in subscriptions:
        totals[sub.category] = totals.get(sub.category, 0.0) + subscription_monthly_cost(sub)
        counts[sub.category] = counts.get(sub.category, 0) + 1

    grand_total = sum(totals.values(), 0.0)

    stats = [
        CategoryStat(
            category=category,
            total_cost=totals[category],
            transaction_count=counts[category],
            percentage=(100 * totals[category] / grand_total) if grand_total > 0 else 0.0,
        )
        for category in Category
        if category in counts
    ]

    # sorted() is stable: equal totals keep declaration order
    return sorted(stats, key=lambda stat: stat.total_cost, reverse=True)


def period_adjusted(
    stats: list[CategoryStat],
    period: StatisticsPeriod,
) -> list[CategoryStat]:
    """
    Rescale category totals for the chosen period.

    Yearly multiplies total_cost by 12. Percentage and transaction count
    are shares and counts, so they stay as they are.
    """
    if period != StatisticsPeriod.YEARLY:
        return list(stats)

    return [
        stat.model_copy(update={"total_cost": stat.total_cost * MONTHS_PER_YEAR})
        for stat in stats
    ]


def pie_slice_angles(stats: list[CategoryStat]) -> list[PieSlice]:
    """
    Lay the categories out around a circle.

    Each slice spans percentage * 3.6 degrees and starts where the previous
    one ended, beginning at -90 (top). When percentages sum to 100 the
    slices cover exactly 360 degrees with no gaps.
    """
    slices = []
    current_angle = CHART_START_ANGLE

    for stat in stats:
        end_angle = current_angle + stat.percentage * DEGREES_PER_PERCENT
        slices.append(PieSlice(
            category=stat.category,
            start_angle=current_angle,
            end_angle=end_angle,
        ))
        current_angle = end_angle

    return slices


def top_category_percentage(stats: list[CategoryStat]) -> Optional[int]:
    """Whole-number share of the largest category, None without data."""
    if not stats:
        return None
    return int(stats[0].percentage)


def build_report(
    subscriptions: Iterable[Subscription],
    period: StatisticsPeriod = StatisticsPeriod.MONTHLY,
) -> StatisticsReport:
    """Compute every figure shown on the statistics screen in one pass."""
    subscriptions = list(subscriptions)
    stats = period_adjusted(category_statistics(subscriptions), period)

    return StatisticsReport(
        period=period,
        total_expense=total_expense(subscriptions, period),
        categories=stats,
        slices=pie_slice_angles(stats),
        top_category_percentage=top_category_percentage(stats),
        active_subscriptions=len(subscriptions),
    )

"""
Cost Normalizer

Maps a (cost, payment cycle) pair onto a common monthly cadence so that
subscriptions billed on different cycles can be summed.

A month is treated as 30 days, so a weekly charge counts 30/7 times.
"""

from decimal import Decimal
from typing import Union

from subtrack.models.subscription import PaymentCycle, Subscription


Amount = Union[Decimal, float, int]


def monthly_equivalent(cost: Amount, cycle: PaymentCycle) -> float:
    """
    Monthly equivalent of a cost charged every `cycle`.

    The caller guarantees cost is non-negative.
    """
    amount = float(cost)
    if cycle == PaymentCycle.MONTHLY:
        return amount
    if cycle == PaymentCycle.QUARTERLY:
        return amount / 3
    if cycle == PaymentCycle.ANNUALLY:
        return amount / 12
    if cycle == PaymentCycle.WEEKLY:
        return amount * 30 / 7
    raise ValueError(f"Unknown payment cycle: {cycle}")


def subscription_monthly_cost(subscription: Subscription) -> float:
    """Shortcut for a subscription's own cost and cycle."""
    return monthly_equivalent(subscription.cost, subscription.payment_cycle)

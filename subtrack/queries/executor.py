"""
Subscription Assistant

DESIGN DECISION: Answers are DETERMINISTIC.
A question is matched against keyword lists to pick an intent, and the
intent is answered from the statistics engine over the current store.
Nothing is estimated or invented: if there are no subscriptions, the
reply says so through data_found.

Keywords are matched as substrings in priority order, expense first,
so "how much would I save on my total cost" is a total-expense question.
Italian variants (spesa, riduci, quanti) and the "categor" stem are
recognised alongside the English words.
"""

from typing import Iterable, Optional

from subtrack.audit import AuditLogger
from subtrack.models.audit import AuditEventBuilder
from subtrack.models.query import AssistantIntent, AssistantReply
from subtrack.statistics import (
    category_statistics,
    subscription_monthly_cost,
    total_monthly_expense,
)
from subtrack.store import SubscriptionStore


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class EmptyQuestionError(QueryExecutionError):
    """The question was blank."""
    pass


# Checked top to bottom, first match wins
INTENT_KEYWORDS: list[tuple[AssistantIntent, tuple[str, ...]]] = [
    (AssistantIntent.TOTAL_EXPENSE, ("cost", "expense", "spend", "spent", "total", "spesa")),
    (AssistantIntent.SAVINGS, ("reduce", "save", "saving", "cancel", "cheaper", "riduci")),
    (AssistantIntent.TOP_CATEGORY, ("categor",)),
    (AssistantIntent.COUNT, ("how many", "count", "number of", "quanti")),
]


def detect_intent(question: str) -> AssistantIntent:
    """Pick the intent for a question, GREETING when nothing matches."""
    lowered = question.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return AssistantIntent.GREETING


class SubscriptionAssistant:
    """
    Answers spending questions about the subscriptions in a store.

    GUARANTEES:
    - Only reports figures derived from stored subscriptions
    - Clear data_found=False when there is nothing to report
    """

    def __init__(
        self,
        store: SubscriptionStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()

    def ask(self, question: str) -> AssistantReply:
        """
        Answer a question.

        Raises:
            EmptyQuestionError: If the question is blank
        """
        question = question.strip()
        if not question:
            raise EmptyQuestionError("Question cannot be empty")

        intent = detect_intent(question)
        subscriptions = self._store.subscriptions

        if intent == AssistantIntent.TOTAL_EXPENSE:
            reply = self._answer_total(question, subscriptions)
        elif intent == AssistantIntent.SAVINGS:
            reply = self._answer_savings(question, subscriptions)
        elif intent == AssistantIntent.TOP_CATEGORY:
            reply = self._answer_top_category(question, subscriptions)
        elif intent == AssistantIntent.COUNT:
            reply = self._answer_count(question, subscriptions)
        else:
            reply = self._answer_greeting(question)

        self._audit_logger.log(AuditEventBuilder.query_executed(
            query_id=reply.query_id,
            intent=reply.intent.value,
        ))
        return reply

    def _answer_total(self, question: str, subscriptions: Iterable) -> AssistantReply:
        subscriptions = list(subscriptions)
        return AssistantReply(
            question=question,
            intent=AssistantIntent.TOTAL_EXPENSE,
            data={
                "total_monthly_expense": total_monthly_expense(subscriptions),
                "subscription_count": len(subscriptions),
            },
            data_found=bool(subscriptions),
            query_description="Total monthly expense across all subscriptions",
        )

    def _answer_savings(self, question: str, subscriptions: Iterable) -> AssistantReply:
        subscriptions = list(subscriptions)
        if not subscriptions:
            return AssistantReply(
                question=question,
                intent=AssistantIntent.SAVINGS,
                data={"most_expensive": None},
                data_found=False,
                query_description="No subscriptions to review for savings",
            )

        most_expensive = max(subscriptions, key=subscription_monthly_cost)
        return AssistantReply(
            question=question,
            intent=AssistantIntent.SAVINGS,
            data={
                "most_expensive": {
                    "id": str(most_expensive.id),
                    "name": most_expensive.name,
                    "cost": float(most_expensive.cost),
                    "currency_code": most_expensive.currency_code,
                    "payment_cycle": most_expensive.payment_cycle.value,
                    "monthly_cost": subscription_monthly_cost(most_expensive),
                },
            },
            data_found=True,
            query_description="Most expensive subscription by monthly cost",
        )

    def _answer_top_category(self, question: str, subscriptions: Iterable) -> AssistantReply:
        stats = category_statistics(subscriptions)
        if not stats:
            # Nothing to rank, fall back to the introduction
            return self._answer_greeting(question)

        top = stats[0]
        return AssistantReply(
            question=question,
            intent=AssistantIntent.TOP_CATEGORY,
            data={
                "category": top.category.value,
                "total_cost": top.total_cost,
                "percentage": top.percentage,
                "transaction_count": top.transaction_count,
            },
            data_found=True,
            query_description="Category with the highest monthly spend",
        )

    def _answer_count(self, question: str, subscriptions: Iterable) -> AssistantReply:
        count = len(list(subscriptions))
        return AssistantReply(
            question=question,
            intent=AssistantIntent.COUNT,
            data={"subscription_count": count},
            data_found=count > 0,
            query_description="Number of active subscriptions",
        )

    def _answer_greeting(self, question: str) -> AssistantReply:
        return AssistantReply(
            question=question,
            intent=AssistantIntent.GREETING,
            data={
                "suggested_topics": [
                    AssistantIntent.TOTAL_EXPENSE.value,
                    AssistantIntent.SAVINGS.value,
                    AssistantIntent.TOP_CATEGORY.value,
                    AssistantIntent.COUNT.value,
                ],
            },
            data_found=True,
            query_description="Introduction and suggested questions",
        )

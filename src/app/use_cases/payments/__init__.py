"""Use cases de pagamento: criação, ciclo de vida, consultas e webhooks."""

from .card_summary import build_card_summary, detect_card_brand
from .create_payment import CreatePaymentResult, CreatePaymentUseCase, PaymentIntent
from .lifecycle import PaymentLifecycleUseCase
from .queries import MAX_PAGE_LIMIT, PaymentQueriesUseCase, TransactionPage
from .reconcile_webhook import ReconcileResult, ReconcileWebhookUseCase, WebhookOutcome

__all__ = [
    "MAX_PAGE_LIMIT",
    "CreatePaymentResult",
    "CreatePaymentUseCase",
    "PaymentIntent",
    "PaymentLifecycleUseCase",
    "PaymentQueriesUseCase",
    "ReconcileResult",
    "ReconcileWebhookUseCase",
    "TransactionPage",
    "WebhookOutcome",
    "build_card_summary",
    "detect_card_brand",
]

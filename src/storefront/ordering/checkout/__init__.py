"""Checkout pipeline: durable record, orchestrator and reconciler."""

from storefront.ordering.checkout.orchestrator import CheckoutOrchestrator
from storefront.ordering.checkout.reconciler import CheckoutReconciler
from storefront.ordering.checkout.record import Checkout, CheckoutStatus
from storefront.ordering.checkout.repository import CheckoutRepository

__all__ = ["Checkout", "CheckoutOrchestrator", "CheckoutReconciler", "CheckoutRepository", "CheckoutStatus"]

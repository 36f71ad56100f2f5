"""Application services, built once per process and handed to the routes.

The services keep no per-request state; routes receive them through the
``get_*`` FastAPI dependencies and tests replace them through
``app.dependency_overrides`` or ``reset_services()``.
"""

from storefront.catalogue.search import ProductSearch
from storefront.notifications.mailer import MailNotifier
from storefront.ordering.checkout import CheckoutOrchestrator, CheckoutReconciler
from storefront.ordering.pricing import PricingEngine
from storefront.promotions.ledger import PromoLedger

_services: dict = {}


def _service(name, factory):
    if name not in _services:
        _services[name] = factory()
    return _services[name]


def get_promo_ledger() -> PromoLedger:
    return _service("promo_ledger", PromoLedger)


def get_pricing_engine() -> PricingEngine:
    return _service("pricing_engine", lambda: PricingEngine(get_promo_ledger()))


def get_notifier() -> MailNotifier:
    return _service("notifier", MailNotifier)


def get_product_search() -> ProductSearch:
    return _service("product_search", ProductSearch)


def get_checkout_orchestrator() -> CheckoutOrchestrator:
    return _service(
        "checkout_orchestrator",
        lambda: CheckoutOrchestrator(
            pricing_engine=get_pricing_engine(),
            promo_ledger=get_promo_ledger(),
            notifier=get_notifier(),
        ),
    )


def get_checkout_reconciler() -> CheckoutReconciler:
    return _service("checkout_reconciler", lambda: CheckoutReconciler(get_checkout_orchestrator()))


def reset_services() -> None:
    _services.clear()

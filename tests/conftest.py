import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


def _reset_adapters():
    from storefront.identity.session import reset_session_service
    from storefront.notifications.channel import reset_email_channel
    from storefront.payments.gateway import reset_gateway
    from storefront.services import reset_services
    from storefront.utils.params import reset_params_codec

    reset_gateway()
    reset_email_channel()
    reset_session_service()
    reset_params_codec()
    reset_services()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and clean up after it."""
    _reset_adapters()
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()
    _reset_adapters()


# ---------------------------------------------------------------------------
# Fake adapters
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    from storefront.payments.gateway import set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def email_channel():
    from storefront.notifications.channel import set_email_channel
    from storefront.notifications.channel.fake_email import FakeEmailAdapter

    fake = FakeEmailAdapter()
    set_email_channel(fake)
    return fake


@pytest.fixture()
def session_service():
    from storefront.identity.session import FakeSessionService, set_session_service

    service = FakeSessionService()
    set_session_service(service)
    return service


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_variant():
    """Create and store a variant; keyword arguments override the defaults."""
    from protean import current_domain
    from storefront.catalogue.variant import ProductVariant

    def _make(**overrides):
        values = {
            "product_ref_id": "prod-001",
            "name": "Linen Shirt",
            "price": 50.0,
            "sizes": {"M": 2},
            "sub_title": "Relaxed fit",
            "color": "white",
            "images": [{"thumbnail": "shirt-thumb.jpg", "original": "shirt.jpg"}],
        }
        values.update(overrides)
        clicks = values.pop("clicks", 0)
        variant = ProductVariant.create(**values)
        variant.clicks = clicks
        current_domain.repository_for(ProductVariant).add(variant)
        return current_domain.repository_for(ProductVariant).get(variant.id)

    return _make


@pytest.fixture()
def make_cart():
    """Build a ``Cart`` from ``(variant, sizes)`` pairs."""
    from storefront.ordering.cart import Cart

    def _make(*lines, delivery_type="post", promo_code=None):
        return Cart.from_dict(
            {
                "products": {
                    str(variant.id): {"productRefId": str(variant.product_ref_id), "sizes": sizes}
                    for variant, sizes in lines
                },
                "deliveryType": delivery_type,
                "promocode": {"code": promo_code} if promo_code else None,
            }
        )

    return _make


ADDRESS = {
    "first_name": "Jane",
    "last_name": "Doe",
    "phone_number": "+1 555 0100",
    "street": "Main Street",
    "city": "Springfield",
    "home_number": "12",
    "post_code": "62701",
}


@pytest.fixture()
def address_fields():
    return dict(ADDRESS)


@pytest.fixture()
def make_customer():
    """Register a user; by default activated with a delivery and an invoice address."""
    from protean import current_domain
    from storefront.identity.addresses import AddAddress
    from storefront.identity.profile import SetInvoiceAddress
    from storefront.identity.registration import ActivateAccount, RegisterUser

    def _make(email="jane@example.com", activated=True, with_address=True, with_invoice=True):
        user_id = current_domain.process(
            RegisterUser(email=email, first_name="Jane", last_name="Doe"),
            asynchronous=False,
        )
        if activated:
            current_domain.process(ActivateAccount(user_id=user_id), asynchronous=False)
        if with_address:
            current_domain.process(AddAddress(user_id=user_id, **ADDRESS), asynchronous=False)
        if with_invoice:
            current_domain.process(SetInvoiceAddress(user_id=user_id, **ADDRESS), asynchronous=False)
        return user_id

    return _make


@pytest.fixture()
def customer(make_customer):
    from protean import current_domain
    from storefront.identity.session import UserPayload
    from storefront.identity.user import User

    user_id = make_customer()
    return UserPayload.from_user(current_domain.repository_for(User).get(user_id))


@pytest.fixture()
def settings():
    from storefront.config import Settings

    return Settings()


@pytest.fixture()
def promo_ledger(settings):
    from storefront.promotions.ledger import PromoLedger

    return PromoLedger(settings)


@pytest.fixture()
def pricing_engine(promo_ledger, settings):
    from storefront.ordering.pricing import PricingEngine

    return PricingEngine(promo_ledger, settings)


@pytest.fixture()
def orchestrator(pricing_engine, promo_ledger, settings, gateway, email_channel):
    from storefront.notifications.mailer import MailNotifier
    from storefront.ordering.checkout import CheckoutOrchestrator

    return CheckoutOrchestrator(
        pricing_engine=pricing_engine,
        promo_ledger=promo_ledger,
        notifier=MailNotifier(settings),
        settings=settings,
    )

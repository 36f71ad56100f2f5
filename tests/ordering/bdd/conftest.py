"""Shared BDD fixtures for the checkout scenarios."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers
from storefront.identity.session import UserPayload
from storefront.identity.user import User


@pytest.fixture()
def cart_promo():
    return None


@pytest.fixture()
def outcome():
    """Container for the result or the error of a When step."""
    return {"result": None, "exc": None}


@given("an activated customer with a delivery and an invoice address", target_fixture="buyer")
def _(make_customer):
    user_id = make_customer()
    return UserPayload.from_user(current_domain.repository_for(User).get(user_id))


@given(
    parsers.cfparse('a variant priced {price:f} USD with {count:d} in stock of size "{size}"'),
    target_fixture="variant",
)
def _(make_variant, price, count, size):
    return make_variant(price=price, sizes={size: count})


@given(parsers.cfparse('a promo code "{code}" worth {percent:d} percent'))
def _(promo_ledger, code, percent):
    promo_ledger.issue("jane@example.com", code=code, discount=percent)


@given(parsers.cfparse('the cart uses promo code "{code}"'), target_fixture="cart_promo")
def _(code):
    return code

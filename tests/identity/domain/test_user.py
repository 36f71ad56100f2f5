"""Tests for the User aggregate: registration, address book and order history."""

from datetime import date

import pytest
from protean.exceptions import ValidationError
from storefront.identity.events import AddressAdded, AddressSelected, OrderRecorded, UserRegistered
from storefront.identity.user import MAX_ADDRESSES, User
from storefront.shared.address import PostalAddress


def _user():
    return User.register(email=" Jane@Example.com ", first_name="Jane", last_name="Doe")


def _address(city="Springfield"):
    return PostalAddress(
        first_name="Jane",
        last_name="Doe",
        phone_number="+1 555 0100",
        street="Main Street",
        city=city,
        home_number="12",
        post_code="62701",
    )


class TestRegistration:
    def test_email_is_normalized(self):
        assert _user().email == "jane@example.com"

    def test_defaults(self):
        user = _user()
        assert user.is_activated is False
        assert user.personal_info.gender == "male"
        assert user.orders == []
        assert user.selected_address is None

    def test_raises_registered_event(self):
        user = _user()
        assert any(isinstance(e, UserRegistered) for e in user._events)

    def test_activate(self):
        user = _user()
        user.activate()
        assert user.is_activated is True
        assert user.activated_at is not None


class TestPersonalInfo:
    def test_partial_update_keeps_other_fields(self):
        user = _user()
        user.update_personal_info(phone_number="+1 555 0199", birth_date=date(1990, 5, 1))

        assert user.personal_info.first_name == "Jane"
        assert user.personal_info.phone_number == "+1 555 0199"
        assert user.personal_info.birth_date == date(1990, 5, 1)

    def test_invalid_gender(self):
        user = _user()
        with pytest.raises(ValidationError):
            user.update_personal_info(gender="robot")


class TestAddressBook:
    def test_first_address_is_selected(self):
        user = _user()
        address = user.add_address(_address())

        assert address.is_selected is True
        assert user.selected_address.id == address.id
        assert any(isinstance(e, AddressAdded) for e in user._events)

    def test_second_address_not_selected_by_default(self):
        user = _user()
        first = user.add_address(_address())
        user.add_address(_address(city="Shelbyville"))

        assert user.selected_address.id == first.id

    def test_add_and_select(self):
        user = _user()
        user.add_address(_address())
        second = user.add_address(_address(city="Shelbyville"), select=True)

        assert user.selected_address.id == second.id
        assert len([a for a in user.addresses if a.is_selected]) == 1

    def test_select_address(self):
        user = _user()
        first = user.add_address(_address())
        second = user.add_address(_address(city="Shelbyville"))
        user.select_address(second.id)

        assert user.selected_address.id == second.id
        event = next(e for e in user._events if isinstance(e, AddressSelected))
        assert event.previous_address_id == str(first.id)

    def test_update_address(self):
        user = _user()
        address = user.add_address(_address())
        user.update_address(address.id, _address(city="Capital City"))

        assert user.find_address(address.id).details.city == "Capital City"

    def test_remove_selected_moves_selection(self):
        user = _user()
        first = user.add_address(_address())
        second = user.add_address(_address(city="Shelbyville"))
        user.remove_address(first.id)

        assert len(user.addresses) == 1
        assert user.selected_address.id == second.id

    def test_unknown_address(self):
        user = _user()
        with pytest.raises(ValidationError):
            user.select_address("missing")

    def test_address_limit(self):
        user = _user()
        for i in range(MAX_ADDRESSES):
            user.add_address(_address(city=f"City {i}"))

        with pytest.raises(ValidationError):
            user.add_address(_address(city="One Too Many"))


class TestInvoiceAndOrders:
    def test_set_invoice_address(self):
        user = _user()
        user.set_invoice_address(_address(), invoice_delivery="paper")

        assert user.invoice_address.city == "Springfield"
        assert user.invoice_delivery == "paper"

    def test_record_order_once(self):
        user = _user()
        assert user.record_order("order-1") is True
        assert user.record_order("order-1") is False
        assert user.orders == ["order-1"]
        assert len([e for e in user._events if isinstance(e, OrderRecorded)]) == 1

    def test_profile(self):
        user = _user()
        user.add_address(_address())
        user.record_order("order-1")
        profile = user.to_profile()

        assert profile["personalInfo"]["email"] == "jane@example.com"
        assert profile["addressList"]["selected"] == profile["addressList"]["list"][0]["id"]
        assert profile["addressList"]["list"][0]["city"] == "Springfield"
        assert profile["orders"] == ["order-1"]

"""User aggregate root with Address entity and PersonalInfo value object."""

import json
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, HasMany, String, Text, ValueObject

from storefront.domain import storefront
from storefront.shared.address import PostalAddress

MAX_ADDRESSES = 10

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class PersonGender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class InvoiceDelivery(Enum):
    ELECTRONIC = "electronic"
    PAPER = "paper"


@storefront.value_object(part_of="User")
class PersonalInfo:
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    gender: String(choices=PersonGender, default=PersonGender.MALE.value)
    birth_date: Date()
    phone_number: String(max_length=30)


@storefront.entity(part_of="User")
class Address:
    """An entry in the user's address book; exactly one is selected for delivery."""

    details: ValueObject(PostalAddress, required=True)
    is_selected: Boolean(default=False)


@storefront.aggregate
class User:
    """A storefront customer.

    Credentials, OTP secrets and tokens belong to the session service; this
    aggregate only keeps the activation flag it reports back.  ``order_ids``
    is an append-only JSON list of order ids.
    """

    email: String(required=True, max_length=254)
    personal_info: ValueObject(PersonalInfo, required=True)
    is_activated: Boolean(default=False)
    addresses: HasMany(Address)
    invoice_address: ValueObject(PostalAddress)
    invoice_delivery: String(choices=InvoiceDelivery, default=InvoiceDelivery.ELECTRONIC.value)
    order_ids: Text(default="[]")
    registered_at: DateTime(default=datetime.now)
    activated_at: DateTime()

    @invariant.post
    def addresses_cannot_exceed_maximum(self):
        if len(self.addresses) > MAX_ADDRESSES:
            raise ValidationError({"addresses": [f"Cannot have more than {MAX_ADDRESSES} addresses"]})

    @invariant.post
    def exactly_one_selected_address_when_addresses_exist(self):
        if not self.addresses:
            return
        selected = [a for a in self.addresses if a.is_selected]
        if len(selected) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be selected"]})

    @classmethod
    def register(cls, email, first_name, last_name, gender=None, birth_date=None, phone_number=None):
        from storefront.identity.events import UserRegistered

        now = datetime.now()
        info = PersonalInfo(
            first_name=first_name,
            last_name=last_name,
            gender=gender or PersonGender.MALE.value,
            birth_date=birth_date,
            phone_number=phone_number,
        )
        user = cls(email=email.strip().lower(), personal_info=info, registered_at=now)
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                first_name=first_name,
                last_name=last_name,
                registered_at=now,
            )
        )
        return user

    @property
    def selected_address(self) -> Address | None:
        return next((a for a in self.addresses if a.is_selected), None)

    @property
    def orders(self) -> list[str]:
        return json.loads(self.order_ids) if self.order_ids else []

    def activate(self):
        from storefront.identity.events import AccountActivated

        if self.is_activated:
            return

        self.is_activated = True
        self.activated_at = datetime.now()
        self.raise_(AccountActivated(user_id=str(self.id), activated_at=self.activated_at))

    def update_personal_info(self, first_name=_UNSET, last_name=_UNSET, gender=_UNSET, birth_date=_UNSET, phone_number=_UNSET):
        from storefront.identity.events import PersonalInfoUpdated

        current = self.personal_info
        self.personal_info = PersonalInfo(
            first_name=first_name if first_name is not _UNSET else current.first_name,
            last_name=last_name if last_name is not _UNSET else current.last_name,
            gender=gender if gender is not _UNSET else current.gender,
            birth_date=birth_date if birth_date is not _UNSET else current.birth_date,
            phone_number=phone_number if phone_number is not _UNSET else current.phone_number,
        )
        self.raise_(
            PersonalInfoUpdated(
                user_id=str(self.id),
                first_name=self.personal_info.first_name,
                last_name=self.personal_info.last_name,
                phone_number=self.personal_info.phone_number,
            )
        )

    def find_address(self, address_id) -> Address:
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})
        return address

    def add_address(self, details: PostalAddress, select=False):
        from storefront.identity.events import AddressAdded

        # First address is always selected
        if not self.addresses:
            select = True

        with atomic_change(self):
            if select:
                for addr in self.addresses:
                    if addr.is_selected:
                        addr.is_selected = False

            address = Address(details=details, is_selected=select)
            self.add_addresses(address)

        self.raise_(
            AddressAdded(
                user_id=str(self.id),
                address_id=str(address.id),
                city=details.city,
                is_selected=str(select),
            )
        )
        return address

    def update_address(self, address_id, details: PostalAddress):
        from storefront.identity.events import AddressUpdated

        address = self.find_address(address_id)
        address.details = details
        self.raise_(AddressUpdated(user_id=str(self.id), address_id=str(address.id)))

    def remove_address(self, address_id):
        from storefront.identity.events import AddressRemoved

        address = self.find_address(address_id)
        was_selected = address.is_selected

        with atomic_change(self):
            self.remove_addresses(address)

            # The first remaining address takes over the selection
            if was_selected and self.addresses:
                self.addresses[0].is_selected = True

        self.raise_(AddressRemoved(user_id=str(self.id), address_id=str(address_id)))

    def select_address(self, address_id):
        from storefront.identity.events import AddressSelected

        address = self.find_address(address_id)
        previous = self.selected_address
        if previous is not None and previous.id == address.id:
            return

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_selected:
                    addr.is_selected = False
            address.is_selected = True

        self.raise_(
            AddressSelected(
                user_id=str(self.id),
                address_id=str(address.id),
                previous_address_id=str(previous.id) if previous else None,
            )
        )

    def set_invoice_address(self, details: PostalAddress, invoice_delivery=None):
        from storefront.identity.events import InvoiceAddressSet

        self.invoice_address = details
        if invoice_delivery is not None:
            self.invoice_delivery = invoice_delivery

        self.raise_(InvoiceAddressSet(user_id=str(self.id), invoice_delivery=self.invoice_delivery))

    def record_order(self, order_id) -> bool:
        """Append ``order_id`` to the history. Recording the same order twice is a no-op."""
        from storefront.identity.events import OrderRecorded

        order_ids = self.orders
        if str(order_id) in order_ids:
            return False

        order_ids.append(str(order_id))
        self.order_ids = json.dumps(order_ids)
        self.raise_(OrderRecorded(user_id=str(self.id), order_id=str(order_id), recorded_at=datetime.now()))
        return True

    def to_profile(self) -> dict:
        return {
            "id": str(self.id),
            "personalInfo": {
                "firstName": self.personal_info.first_name,
                "lastName": self.personal_info.last_name,
                "email": self.email,
                "gender": self.personal_info.gender,
                "birthDate": self.personal_info.birth_date.isoformat() if self.personal_info.birth_date else None,
                "phoneNumber": self.personal_info.phone_number,
            },
            "activation": {"isActivated": self.is_activated},
            "addressList": {
                "list": [{"id": str(a.id), **a.details.to_dict()} for a in self.addresses],
                "selected": str(self.selected_address.id) if self.selected_address else None,
            },
            "invoiceAddress": self.invoice_address.to_dict() if self.invoice_address else None,
            "invoiceDelivery": self.invoice_delivery,
            "orders": self.orders,
        }

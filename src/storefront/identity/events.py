"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    first_name: String(required=True)
    last_name: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class AccountActivated:
    """The session service confirmed the user's one-time password."""

    __version__ = 1

    user_id: Identifier(required=True)
    activated_at: DateTime(required=True)


@storefront.event(part_of="User")
class PersonalInfoUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    first_name: String(required=True)
    last_name: String(required=True)
    phone_number: String()


@storefront.event(part_of="User")
class AddressAdded:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String(required=True)
    is_selected: String(required=True)


@storefront.event(part_of="User")
class AddressUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.event(part_of="User")
class AddressRemoved:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.event(part_of="User")
class AddressSelected:
    """The address used for deliveries changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    previous_address_id: Identifier()


@storefront.event(part_of="User")
class InvoiceAddressSet:
    __version__ = 1

    user_id: Identifier(required=True)
    invoice_delivery: String(required=True)


@storefront.event(part_of="User")
class OrderRecorded:
    """A paid order was appended to the user's order history."""

    __version__ = 1

    user_id: Identifier(required=True)
    order_id: Identifier(required=True)
    recorded_at: DateTime(required=True)

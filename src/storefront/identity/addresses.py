"""Address book management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.shared.address import PostalAddress

_ADDRESS_FIELDS = (
    "first_name",
    "last_name",
    "phone_number",
    "street",
    "city",
    "home_number",
    "post_code",
    "add_info",
)


@storefront.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    phone_number: String(required=True, max_length=30)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    home_number: String(required=True, max_length=20)
    post_code: String(required=True, max_length=20)
    add_info: String(max_length=500)
    select: Boolean(default=False)


@storefront.command(part_of="User")
class UpdateAddress:
    """Replace fields of an address; omitted fields keep their value."""

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    first_name: String(max_length=50)
    last_name: String(max_length=50)
    phone_number: String(max_length=30)
    street: String(max_length=255)
    city: String(max_length=100)
    home_number: String(max_length=20)
    post_code: String(max_length=20)
    add_info: String(max_length=500)


@storefront.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="User")
class SelectAddress:
    """Choose the address deliveries go to."""

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        details = PostalAddress(**{field: getattr(command, field) for field in _ADDRESS_FIELDS})
        address = user.add_address(details, select=bool(command.select))
        repo.add(user)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        current = user.find_address(command.address_id).details
        values = {}
        for field in _ADDRESS_FIELDS:
            value = getattr(command, field)
            values[field] = value if value is not None else getattr(current, field)

        user.update_address(command.address_id, PostalAddress(**values))
        repo.add(user)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_address(command.address_id)
        repo.add(user)

    @handle(SelectAddress)
    def select_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.select_address(command.address_id)
        repo.add(user)

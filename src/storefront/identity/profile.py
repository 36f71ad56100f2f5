"""Personal info and invoice address updates."""

from datetime import date

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.shared.address import PostalAddress


@storefront.command(part_of="User")
class UpdatePersonalInfo:
    """Change name, gender, birth date or phone; omitted fields keep their value."""

    user_id: Identifier(required=True)
    first_name: String(max_length=50)
    last_name: String(max_length=50)
    gender: String(max_length=10)
    birth_date: String(max_length=10)
    phone_number: String(max_length=30)


@storefront.command(part_of="User")
class SetInvoiceAddress:
    user_id: Identifier(required=True)
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    phone_number: String(required=True, max_length=30)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    home_number: String(required=True, max_length=20)
    post_code: String(required=True, max_length=20)
    add_info: String(max_length=500)
    invoice_delivery: String(max_length=10)


@storefront.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdatePersonalInfo)
    def update_personal_info(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        kwargs = {}
        for field in ("first_name", "last_name", "gender", "phone_number"):
            value = getattr(command, field)
            if value is not None:
                kwargs[field] = value
        if command.birth_date is not None:
            kwargs["birth_date"] = date.fromisoformat(command.birth_date) if command.birth_date else None

        user.update_personal_info(**kwargs)
        repo.add(user)

    @handle(SetInvoiceAddress)
    def set_invoice_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_invoice_address(
            PostalAddress(
                first_name=command.first_name,
                last_name=command.last_name,
                phone_number=command.phone_number,
                street=command.street,
                city=command.city,
                home_number=command.home_number,
                post_code=command.post_code,
                add_info=command.add_info,
            ),
            invoice_delivery=command.invoice_delivery,
        )
        repo.add(user)

"""User registration and account activation.

Registering with ``news_subscription`` also subscribes the email to the
newsletter and mails it a promo code, unless it already holds one.
"""

from datetime import date

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notifications.mailer import MailNotifier
from storefront.promotions.ledger import PromoLedger


@storefront.command(part_of="User")
class RegisterUser:
    email: String(required=True, max_length=254)
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    gender: String(max_length=10)
    birth_date: String(max_length=10)
    phone_number: String(max_length=30)
    news_subscription: Boolean(default=False)


@storefront.command(part_of="User")
class ActivateAccount:
    """Issued by the session service once the user's OTP has been verified."""

    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": [f"{command.email} is already registered"]})

        user = User.register(
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            gender=command.gender,
            birth_date=date.fromisoformat(command.birth_date) if command.birth_date else None,
            phone_number=command.phone_number,
        )
        repo.add(user)

        if command.news_subscription:
            issued = PromoLedger().subscribe(user.email)
            if issued is not None:
                MailNotifier().send_promo_code(user.email, issued.code, issued.percent_discount, issued.end_date)

        return str(user.id)

    @handle(ActivateAccount)
    def activate_account(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.activate()
        repo.add(user)

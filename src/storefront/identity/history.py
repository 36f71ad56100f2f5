"""Order history: the checkout appends each paid order to its user."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class RecordOrder:
    user_id: Identifier(required=True)
    order_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class OrderHistoryHandler:
    @handle(RecordOrder)
    def record_order(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        if user.record_order(command.order_id):
            repo.add(user)

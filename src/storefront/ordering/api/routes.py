"""FastAPI endpoint that runs a checkout."""

from fastapi import APIRouter, Depends

from storefront.identity.session import UserPayload, activated_user
from storefront.ordering.api.schemas import ProcessPaymentRequest
from storefront.ordering.cart import Cart
from storefront.ordering.checkout import CheckoutOrchestrator
from storefront.services import get_checkout_orchestrator

order_router = APIRouter(prefix="/order", tags=["order"])


@order_router.post("/process/payment")
def process_payment(
    body: ProcessPaymentRequest,
    user: UserPayload = Depends(activated_user),
    orchestrator: CheckoutOrchestrator = Depends(get_checkout_orchestrator),
) -> dict:
    cart = Cart.from_dict(body.cart)
    return orchestrator.process_payment(
        user,
        cart,
        payment_source=body.payment_data.source,
        idempotency_key=body.idempotency_key,
    )

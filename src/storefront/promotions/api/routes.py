"""FastAPI endpoints for newsletter promo codes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaValidationError

from storefront.config import settings
from storefront.notifications.mailer import MailNotifier
from storefront.promotions.api.schemas import (
    InviteRequest,
    MessageResponse,
    SubscriptionParams,
    TestCodeRequest,
    TestCodeResponse,
)
from storefront.promotions.ledger import PromoLedger
from storefront.services import get_notifier, get_promo_ledger
from storefront.utils.params import get_params_codec

promo_router = APIRouter(prefix="/promo", tags=["promo"])


@promo_router.get("/create/code")
async def create_code(
    data: str,
    ledger: PromoLedger = Depends(get_promo_ledger),
    notifier: MailNotifier = Depends(get_notifier),
):
    """Issue a code for the email in an emailed subscribe link, then send the user back to the shop."""
    try:
        params = SubscriptionParams.model_validate(get_params_codec().decode(data))
    except SchemaValidationError:
        raise ValidationError({"email": ["A valid email is required"]}) from None

    issued = ledger.issue(params.email)
    notifier.send_promo_code(params.email, issued.code, issued.percent_discount, issued.end_date)
    return RedirectResponse(f"{settings.client_url}/subscribed")


@promo_router.post("/testcode", response_model=TestCodeResponse, response_model_by_alias=True)
async def test_code(body: TestCodeRequest, ledger: PromoLedger = Depends(get_promo_ledger)):
    return ledger.validate(body.code)


@promo_router.post("/invite", response_model=MessageResponse)
async def invite(
    body: InviteRequest,
    request: Request,
    ledger: PromoLedger = Depends(get_promo_ledger),
    notifier: MailNotifier = Depends(get_notifier),
) -> MessageResponse:
    percent_discount = ledger.invite(body.email)
    data = get_params_codec().encode({"email": body.email})
    link = str(request.url_for("create_code").include_query_params(data=data))
    notifier.send_promo_invite(body.email, percent_discount, link)
    return MessageResponse(message=f"Newsletter invitation sent to {body.email}")

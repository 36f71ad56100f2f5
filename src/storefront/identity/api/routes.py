"""FastAPI endpoints for the user profile and address book.

Everything but registration acts on the user behind the bearer token.
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.addresses import AddAddress, RemoveAddress, SelectAddress, UpdateAddress
from storefront.identity.api.schemas import (
    AddAddressRequest,
    AddressIdResponse,
    InvoiceAddressRequest,
    RegisterUserRequest,
    UpdateAddressRequest,
    UpdatePersonalInfoRequest,
    UserIdResponse,
)
from storefront.identity.profile import SetInvoiceAddress, UpdatePersonalInfo
from storefront.identity.registration import RegisterUser
from storefront.identity.session import UserPayload, current_user
from storefront.identity.user import User
from storefront.ordering.order import Order

user_router = APIRouter(prefix="/user", tags=["user"])


def _profile(user_id: str) -> dict:
    return current_domain.repository_for(User).get(user_id).to_profile()


@user_router.post("/register", status_code=201, response_model=UserIdResponse, response_model_by_alias=True)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        gender=body.gender,
        birth_date=body.birth_date,
        phone_number=body.phone_number,
        news_subscription=body.news_subscription,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=user_id)


@user_router.get("/profile")
async def get_profile(user: UserPayload = Depends(current_user)) -> dict:
    return _profile(user.id)


@user_router.put("/personal-info")
async def update_personal_info(body: UpdatePersonalInfoRequest, user: UserPayload = Depends(current_user)) -> dict:
    command = UpdatePersonalInfo(user_id=user.id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    return _profile(user.id)


@user_router.post("/addresses", status_code=201, response_model=AddressIdResponse, response_model_by_alias=True)
async def add_address(body: AddAddressRequest, user: UserPayload = Depends(current_user)) -> AddressIdResponse:
    address_id = current_domain.process(AddAddress(user_id=user.id, **body.model_dump()), asynchronous=False)
    return AddressIdResponse(address_id=address_id)


@user_router.put("/addresses/{address_id}")
async def update_address(address_id: str, body: UpdateAddressRequest, user: UserPayload = Depends(current_user)) -> dict:
    command = UpdateAddress(user_id=user.id, address_id=address_id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    return _profile(user.id)


@user_router.delete("/addresses/{address_id}")
async def remove_address(address_id: str, user: UserPayload = Depends(current_user)) -> dict:
    current_domain.process(RemoveAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return _profile(user.id)


@user_router.put("/addresses/{address_id}/select")
async def select_address(address_id: str, user: UserPayload = Depends(current_user)) -> dict:
    current_domain.process(SelectAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return _profile(user.id)


@user_router.put("/invoice-address")
async def set_invoice_address(body: InvoiceAddressRequest, user: UserPayload = Depends(current_user)) -> dict:
    current_domain.process(SetInvoiceAddress(user_id=user.id, **body.model_dump()), asynchronous=False)
    return _profile(user.id)


@user_router.get("/orders")
async def list_orders(user: UserPayload = Depends(current_user)) -> dict:
    order_ids = current_domain.repository_for(User).get(user.id).orders
    orders = current_domain.repository_for(Order)
    return {"orders": [orders.get(order_id).to_summary() for order_id in reversed(order_ids)]}

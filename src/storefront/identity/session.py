"""Session service port.

Token issuance and verification live in a separate service.  The storefront
only resolves a bearer token into the payload of the user it belongs to;
``FakeSessionService`` stands in for the real service in development and
tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fastapi import Header
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import Forbidden, Unauthorized
from storefront.identity.user import User


@dataclass(frozen=True)
class UserPayload:
    id: str
    personal_info: dict = field(default_factory=dict)
    activation: dict = field(default_factory=dict)
    access_token: str | None = None

    @property
    def is_activated(self) -> bool:
        return bool(self.activation.get("isActivated"))

    @classmethod
    def from_user(cls, user: User, access_token=None) -> "UserPayload":
        return cls(
            id=str(user.id),
            personal_info={
                "firstName": user.personal_info.first_name,
                "lastName": user.personal_info.last_name,
                "email": user.email,
            },
            activation={"isActivated": user.is_activated},
            access_token=access_token,
        )


class SessionService(ABC):
    @abstractmethod
    def resolve(self, access_token: str) -> UserPayload:
        """Return the payload for ``access_token`` or raise ``Unauthorized``."""
        ...


class FakeSessionService(SessionService):
    """Maps tokens handed out by ``issue`` to user ids."""

    def __init__(self) -> None:
        self.tokens: dict[str, str] = {}

    def issue(self, user_id: str, token: str | None = None) -> str:
        token = token or f"token-{user_id}"
        self.tokens[token] = str(user_id)
        return token

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def resolve(self, access_token: str) -> UserPayload:
        user_id = self.tokens.get(access_token)
        if user_id is None:
            raise Unauthorized("Invalid or expired access token")

        try:
            user = current_domain.repository_for(User).get(user_id)
        except ObjectNotFoundError:
            raise Unauthorized("User no longer exists") from None
        return UserPayload.from_user(user, access_token=access_token)


_current_service: SessionService | None = None


def get_session_service() -> SessionService:
    global _current_service
    if _current_service is None:
        _current_service = FakeSessionService()
    return _current_service


def set_session_service(service: SessionService) -> None:
    global _current_service
    _current_service = service


def reset_session_service() -> None:
    global _current_service
    _current_service = None


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
async def current_user(authorization: str = Header(default="")) -> UserPayload:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing bearer token")
    return get_session_service().resolve(token.strip())


async def activated_user(authorization: str = Header(default="")) -> UserPayload:
    payload = await current_user(authorization)
    if not payload.is_activated:
        raise Forbidden("Account is not activated")
    return payload

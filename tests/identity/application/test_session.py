"""Tests for the session service and the FastAPI user dependencies."""

import asyncio

import pytest
from storefront.errors import Forbidden, Unauthorized
from storefront.identity.session import activated_user, current_user


class TestFakeSessionService:
    def test_resolve_issued_token(self, session_service, make_customer):
        user_id = make_customer()
        token = session_service.issue(user_id)

        payload = session_service.resolve(token)
        assert payload.id == user_id
        assert payload.is_activated is True
        assert payload.personal_info["email"] == "jane@example.com"
        assert payload.access_token == token

    def test_unknown_token(self, session_service):
        with pytest.raises(Unauthorized):
            session_service.resolve("nope")

    def test_revoked_token(self, session_service, make_customer):
        token = session_service.issue(make_customer())
        session_service.revoke(token)
        with pytest.raises(Unauthorized):
            session_service.resolve(token)

    def test_token_of_deleted_user(self, session_service):
        token = session_service.issue("gone")
        with pytest.raises(Unauthorized):
            session_service.resolve(token)


class TestDependencies:
    def test_bearer_header(self, session_service, make_customer):
        user_id = make_customer()
        token = session_service.issue(user_id)

        payload = asyncio.run(current_user(f"Bearer {token}"))
        assert payload.id == user_id

    def test_missing_header(self, session_service):
        with pytest.raises(Unauthorized):
            asyncio.run(current_user(""))

    def test_wrong_scheme(self, session_service):
        with pytest.raises(Unauthorized):
            asyncio.run(current_user("Basic abc"))

    def test_inactive_user_is_forbidden(self, session_service, make_customer):
        token = session_service.issue(make_customer(activated=False))
        with pytest.raises(Forbidden):
            asyncio.run(activated_user(f"Bearer {token}"))

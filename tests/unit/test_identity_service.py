"""Unit tests for the identity service."""

import asyncio
import logging
from typing import Optional

import pytest

from taskboard.kernel.identity.errors import (
    AuthenticationError,
    DuplicateEmailError,
    PersistenceError,
    ValidationError,
)
from taskboard.kernel.identity.identity_service import IdentityService
from taskboard.kernel.identity.password import PasswordHasher
from taskboard.kernel.identity.records import NewUser, UserRecord
from taskboard.kernel.identity.tokens import JWTManager


class CountingHasher(PasswordHasher):
    """Records every stored hash handed to verify, and counts hash calls."""

    def __init__(self):
        super().__init__(rounds=4)
        self.verified_against: list[str] = []
        self.hash_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return super().hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        self.verified_against.append(hashed_password)
        return super().verify(plain_password, hashed_password)


class SlowUserStore:
    async def insert_one(self, record: NewUser) -> str:
        await asyncio.sleep(5)
        return "never"

    async def find_one(self, email: str) -> Optional[UserRecord]:
        await asyncio.sleep(5)
        return None


class BrokenUserStore:
    async def insert_one(self, record: NewUser) -> str:
        raise PersistenceError("User store rejected the insert")

    async def find_one(self, email: str) -> Optional[UserRecord]:
        raise PersistenceError("User store is unavailable")


class TestSignUp:
    """Tests for IdentityService.sign_up."""

    async def test_sign_up_returns_identity_and_token(self, identity_service, sign_up_payload):
        result = await identity_service.sign_up(**sign_up_payload)

        assert result.user.email == "a@x.com"
        assert result.user.name == "A"
        assert result.user.id
        assert result.token

    async def test_result_never_exposes_password_hash(self, identity_service, sign_up_payload):
        result = await identity_service.sign_up(**sign_up_payload)

        dumped = result.model_dump()
        assert "password_hash" not in dumped["user"]
        assert "password" not in dumped["user"]

    async def test_stored_hash_is_not_plaintext(
        self, identity_service, user_store, hasher, sign_up_payload
    ):
        result = await identity_service.sign_up(**sign_up_payload)

        stored = user_store.records[result.user.id]
        assert stored.password_hash != "pw123"
        assert hasher.verify("pw123", stored.password_hash)

    async def test_token_identifies_new_user(
        self, identity_service, jwt_manager: JWTManager, sign_up_payload
    ):
        result = await identity_service.sign_up(**sign_up_payload)

        claims = jwt_manager.verify_access_token(result.token)
        assert claims.sub == result.user.id
        assert claims.email == "a@x.com"

    async def test_email_is_normalized(self, identity_service, user_store):
        result = await identity_service.sign_up(email="  A@X.com ", password="pw123", name="A")

        assert result.user.email == "a@x.com"
        assert user_store.records[result.user.id].email == "a@x.com"

    async def test_avatar_is_kept(self, identity_service):
        result = await identity_service.sign_up(
            email="a@x.com", password="pw123", name="A", avatar="https://img/a.png"
        )

        assert result.user.avatar == "https://img/a.png"

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"password": None}, "password"),
            ({"password": ""}, "password"),
            ({"name": "   "}, "name"),
            ({"email": None}, "email"),
            ({"email": "not-an-email"}, "email"),
        ],
    )
    async def test_invalid_input_never_reaches_store(
        self, identity_service, user_store, sign_up_payload, overrides, field
    ):
        with pytest.raises(ValidationError) as exc_info:
            await identity_service.sign_up(**{**sign_up_payload, **overrides})

        assert exc_info.value.field == field
        assert user_store.insert_calls == 0

    async def test_duplicate_email_surfaces_from_store(self, identity_service, sign_up_payload):
        await identity_service.sign_up(**sign_up_payload)

        with pytest.raises(DuplicateEmailError) as exc_info:
            await identity_service.sign_up(**sign_up_payload)

        assert isinstance(exc_info.value, PersistenceError)

    async def test_store_timeout_is_persistence_error(self, hasher, jwt_manager, sign_up_payload):
        service = IdentityService(
            store=SlowUserStore(), hasher=hasher, token_issuer=jwt_manager, store_timeout=0.05
        )

        with pytest.raises(PersistenceError, match="timed out"):
            await service.sign_up(**sign_up_payload)

    async def test_store_failure_propagates(self, hasher, jwt_manager, sign_up_payload):
        service = IdentityService(store=BrokenUserStore(), hasher=hasher, token_issuer=jwt_manager)

        with pytest.raises(PersistenceError):
            await service.sign_up(**sign_up_payload)


class TestSignIn:
    """Tests for IdentityService.sign_in."""

    async def test_sign_in_after_sign_up(self, identity_service, sign_up_payload):
        signed_up = await identity_service.sign_up(**sign_up_payload)

        signed_in = await identity_service.sign_in(email="a@x.com", password="pw123")

        assert signed_in.user.id == signed_up.user.id
        assert signed_in.user.name == "A"
        assert signed_in.token
        assert signed_in.token != signed_up.token
        assert "password_hash" not in signed_in.model_dump()["user"]

    async def test_sign_in_ignores_email_case(self, identity_service, sign_up_payload):
        signed_up = await identity_service.sign_up(**sign_up_payload)

        signed_in = await identity_service.sign_in(email="A@X.COM", password="pw123")

        assert signed_in.user.id == signed_up.user.id

    async def test_wrong_password_fails(self, identity_service, sign_up_payload):
        await identity_service.sign_up(**sign_up_payload)

        with pytest.raises(AuthenticationError):
            await identity_service.sign_in(email="a@x.com", password="wrong")

    async def test_unknown_email_fails_like_wrong_password(self, identity_service, sign_up_payload):
        await identity_service.sign_up(**sign_up_payload)

        with pytest.raises(AuthenticationError) as wrong_password:
            await identity_service.sign_in(email="a@x.com", password="wrong")
        with pytest.raises(AuthenticationError) as unknown_email:
            await identity_service.sign_in(email="nobody@x.com", password="pw123")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert str(wrong_password.value) == str(unknown_email.value) == "Invalid credentials"
        assert wrong_password.value.to_dict() == unknown_email.value.to_dict()

    async def test_unknown_email_still_runs_a_verification(
        self, user_store, jwt_manager, sign_up_payload
    ):
        hasher = CountingHasher()
        service = IdentityService(store=user_store, hasher=hasher, token_issuer=jwt_manager)
        await service.sign_up(**sign_up_payload)

        with pytest.raises(AuthenticationError):
            await service.sign_in(email="nobody@x.com", password="pw123")
        with pytest.raises(AuthenticationError):
            await service.sign_in(email="a@x.com", password="wrong")

        assert len(hasher.verified_against) == 2
        assert hasher.verified_against[0] == hasher.dummy_hash

    @pytest.mark.parametrize(
        "email, password, field",
        [
            (None, "pw123", "email"),
            ("", "pw123", "email"),
            ("a@x.com", None, "password"),
            ("a@x.com", "", "password"),
        ],
    )
    async def test_missing_fields(self, identity_service, email, password, field):
        with pytest.raises(ValidationError) as exc_info:
            await identity_service.sign_in(email=email, password=password)

        assert exc_info.value.field == field

    async def test_store_timeout_is_persistence_error(self, hasher, jwt_manager):
        service = IdentityService(
            store=SlowUserStore(), hasher=hasher, token_issuer=jwt_manager, store_timeout=0.05
        )

        with pytest.raises(PersistenceError):
            await service.sign_in(email="a@x.com", password="pw123")

    async def test_store_failure_is_not_an_authentication_error(self, hasher, jwt_manager):
        service = IdentityService(store=BrokenUserStore(), hasher=hasher, token_issuer=jwt_manager)

        with pytest.raises(PersistenceError):
            await service.sign_in(email="a@x.com", password="pw123")

    async def test_dummy_hash_is_built_with_the_service(self, user_store, jwt_manager):
        hasher = CountingHasher()
        service = IdentityService(store=user_store, hasher=hasher, token_issuer=jwt_manager)

        assert "dummy_hash" in hasher.__dict__
        built = hasher.hash_calls

        with pytest.raises(AuthenticationError):
            await service.sign_in(email="nobody@x.com", password="pw123")

        assert hasher.hash_calls == built

    async def test_outdated_work_factor_is_logged(
        self, user_store, jwt_manager, sign_up_payload, caplog
    ):
        old = IdentityService(
            store=user_store, hasher=PasswordHasher(rounds=5), token_issuer=jwt_manager
        )
        await old.sign_up(**sign_up_payload)
        current = IdentityService(
            store=user_store, hasher=PasswordHasher(rounds=4), token_issuer=jwt_manager
        )

        with caplog.at_level(logging.INFO, logger="taskboard.kernel.identity.identity_service"):
            result = await current.sign_in(email="a@x.com", password="pw123")

        stale = [
            r for r in caplog.records
            if r.getMessage() == "Stored hash uses outdated work factor"
        ]
        assert len(stale) == 1
        assert stale[0].user_id == result.user.id

    async def test_current_work_factor_is_not_logged(
        self, identity_service, sign_up_payload, caplog
    ):
        await identity_service.sign_up(**sign_up_payload)

        with caplog.at_level(logging.INFO, logger="taskboard.kernel.identity.identity_service"):
            await identity_service.sign_in(email="a@x.com", password="pw123")

        assert "Stored hash uses outdated work factor" not in caplog.messages

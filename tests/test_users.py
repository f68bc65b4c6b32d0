# =============================================================================
# tests/test_users.py - Account and Credential Tests
# =============================================================================
# Run with: pytest tests/test_users.py -v
# =============================================================================

from datetime import timedelta

import pytest

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from core.models.user import Role
from core.services import UserService
from lib.security import TokenError, hash_password
from lib.utils import utc_now
from tests.fakes import create_user


class TestRegister:
    def test_first_user_becomes_super_admin(self, user_service):
        first, _ = user_service.register("a@example.com", "first", "secret1")
        second, _ = user_service.register("b@example.com", "second", "secret2")

        assert first.role == Role.SUPER_ADMIN
        assert second.role == Role.USER

    def test_password_is_hashed(self, user_service):
        user, _ = user_service.register("a@example.com", "first", "secret1")

        assert user.password_hash != "secret1"
        assert user.password_hash.startswith("$2")

    def test_returns_tokens_with_role(self, user_service, tokens):
        user, pair = user_service.register("a@example.com", "first", "secret1")

        claims = tokens.decode_access(pair.access_token)
        assert claims.sub == user.id
        assert claims.role == "super_admin"

    def test_duplicate_email(self, user_service, owner):
        with pytest.raises(ConflictError) as exc_info:
            user_service.register(owner.email, "someone", "secret1")

        assert exc_info.value.code == "EMAIL_CONFLICT"

    def test_duplicate_username(self, user_service, owner):
        with pytest.raises(ConflictError) as exc_info:
            user_service.register("new@example.com", owner.username, "secret1")

        assert exc_info.value.code == "USERNAME_CONFLICT"

    def test_sends_verification_email(self, user_service, outbox):
        user, _ = user_service.register("a@example.com", "first", "secret1")

        template, recipient, context = outbox[-1]
        assert template == "welcome"
        assert recipient == "a@example.com"
        assert context["verify_link"] == (
            f"https://modelhub.test/verify-email?token={user.verification_token}"
        )
        assert not user.email_verified


class TestAuthenticate:
    @pytest.fixture
    def member(self, users_repo):
        return create_user(users_repo, "carol", password_hash=hash_password("secret1"))

    def test_valid_credentials(self, user_service, member):
        user, pair = user_service.authenticate(member.email, "secret1")

        assert user.id == member.id
        assert pair.token_type == "bearer"

    def test_wrong_password(self, user_service, member):
        with pytest.raises(UnauthorizedError):
            user_service.authenticate(member.email, "wrong")

    def test_unknown_email(self, user_service):
        with pytest.raises(UnauthorizedError):
            user_service.authenticate("nobody@example.com", "secret1")

    def test_banned_account(self, user_service, users_repo, member):
        users_repo.update(member.id, {"is_banned": True, "banned_reason": "Spam"})

        with pytest.raises(ForbiddenError) as exc_info:
            user_service.authenticate(member.email, "secret1")

        assert exc_info.value.suggestion == "Spam"

    def test_banned_with_wrong_password_reveals_nothing(self, user_service, users_repo, member):
        users_repo.update(member.id, {"is_banned": True})

        with pytest.raises(UnauthorizedError):
            user_service.authenticate(member.email, "wrong")


class TestRefresh:
    def test_new_pair_carries_current_role(self, user_service, users_repo, tokens, owner):
        pair = tokens.issue(owner.id, owner.email, owner.role.value)
        users_repo.update(owner.id, {"role": Role.ADMIN})

        refreshed = user_service.refresh(pair.refresh_token)

        assert tokens.decode_access(refreshed.access_token).role == "admin"

    def test_access_token_is_not_a_refresh_token(self, user_service, tokens, owner):
        pair = tokens.issue(owner.id, owner.email, owner.role.value)

        with pytest.raises(TokenError):
            user_service.refresh(pair.access_token)

    def test_deleted_account(self, user_service, users_repo, tokens, owner):
        pair = tokens.issue(owner.id, owner.email, owner.role.value)
        users_repo.delete(owner.id)

        with pytest.raises(UnauthorizedError):
            user_service.refresh(pair.refresh_token)

    def test_banned_account(self, user_service, users_repo, tokens, owner):
        pair = tokens.issue(owner.id, owner.email, owner.role.value)
        users_repo.update(owner.id, {"is_banned": True})

        with pytest.raises(ForbiddenError):
            user_service.refresh(pair.refresh_token)


class TestEmailAndPasswords:
    def test_verify_email(self, user_service):
        user, _ = user_service.register("a@example.com", "first", "secret1")

        verified = user_service.verify_email(user.verification_token)

        assert verified.email_verified
        assert verified.verification_token is None

    def test_verify_unknown_token(self, user_service):
        with pytest.raises(InvalidInputError):
            user_service.verify_email("nope")

    def test_password_reset_flow(self, user_service, users_repo, outbox, owner):
        user_service.request_password_reset(owner.email)

        token = users_repo.find_by_id(owner.id).reset_token
        assert token
        assert outbox[-1][0] == "reset_password"
        assert outbox[-1][2]["reset_link"] == f"https://modelhub.test/update-password?token={token}"

        user_service.reset_password(token, "brand-new")

        user, _ = user_service.authenticate(owner.email, "brand-new")
        assert user.reset_token is None

    def test_reset_request_for_unknown_email_is_silent(self, user_service, outbox):
        user_service.request_password_reset("nobody@example.com")

        assert outbox == []

    def test_reset_request_for_banned_account_is_silent(self, user_service, users_repo, outbox, owner):
        users_repo.update(owner.id, {"is_banned": True})

        user_service.request_password_reset(owner.email)

        assert outbox == []
        assert users_repo.find_by_id(owner.id).reset_token is None

    def test_expired_reset_token(self, user_service, users_repo, owner):
        users_repo.update(owner.id, {
            "reset_token": "stale",
            "reset_token_expires": utc_now() - timedelta(minutes=1),
        })

        with pytest.raises(InvalidInputError) as exc_info:
            user_service.reset_password("stale", "brand-new")

        assert exc_info.value.code == "TOKEN_EXPIRED"

    def test_change_password(self, user_service, users_repo):
        user = create_user(users_repo, "dave", password_hash=hash_password("old-secret"))

        with pytest.raises(InvalidInputError) as exc_info:
            user_service.change_password(user.id, "wrong", "new-secret")
        assert exc_info.value.code == "INCORRECT_PASSWORD"

        user_service.change_password(user.id, "old-secret", "new-secret")
        user_service.authenticate(user.email, "new-secret")


class TestEmailChange:
    def test_request_mails_the_new_address(self, user_service, users_repo, outbox, owner):
        user_service.request_email_change(owner.id, "alice@new.example.com")

        stored = users_repo.find_by_id(owner.id)
        assert stored.email == owner.email
        assert stored.new_email == "alice@new.example.com"
        assert stored.email_change_token

        template, recipient, context = outbox[-1]
        assert template == "email_change"
        assert recipient == "alice@new.example.com"
        assert context["verify_link"].endswith(f"/verify-email-change?token={stored.email_change_token}")

    def test_request_for_taken_email(self, user_service, users_repo, outbox, owner, other_user):
        with pytest.raises(ConflictError) as exc_info:
            user_service.request_email_change(owner.id, other_user.email)

        assert exc_info.value.code == "EMAIL_CONFLICT"
        assert users_repo.find_by_id(owner.id).email_change_token is None
        assert outbox == []

    def test_request_for_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.request_email_change("00000000-0000-0000-0000-000000000000", "x@example.com")

    def test_verify_swaps_email(self, user_service, users_repo, owner):
        users_repo.update(owner.id, {"email_verified": False})
        user_service.request_email_change(owner.id, "alice@new.example.com")
        token = users_repo.find_by_id(owner.id).email_change_token

        updated = user_service.verify_email_change(token)

        assert updated.email == "alice@new.example.com"
        assert updated.email_verified
        assert updated.new_email is None
        assert updated.email_change_token is None
        assert users_repo.find_by_email(owner.email) is None

    def test_verify_unknown_token(self, user_service):
        with pytest.raises(InvalidInputError) as exc_info:
            user_service.verify_email_change("nope")

        assert exc_info.value.code == "INVALID_TOKEN"

    def test_verify_when_address_was_taken_meanwhile(self, user_service, users_repo, owner):
        user_service.request_email_change(owner.id, "alice@new.example.com")
        token = users_repo.find_by_id(owner.id).email_change_token
        create_user(users_repo, "squatter", email="alice@new.example.com")

        with pytest.raises(ConflictError):
            user_service.verify_email_change(token)

        assert users_repo.find_by_id(owner.id).email == owner.email

    def test_token_is_single_use(self, user_service, users_repo, owner):
        user_service.request_email_change(owner.id, "alice@new.example.com")
        token = users_repo.find_by_id(owner.id).email_change_token
        user_service.verify_email_change(token)

        with pytest.raises(InvalidInputError):
            user_service.verify_email_change(token)


class TestReads:
    def test_public_profile_hides_email(self, user_service, owner):
        profile = user_service.get_public_profile(owner.id)

        assert profile.username == owner.username
        assert "email" not in profile.model_dump()

    def test_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.get("00000000-0000-0000-0000-000000000000")


class TestBootstrapAdmin:
    def test_creates_super_admin_on_empty_table(self, users_repo, tokens, notifications, settings):
        configured = settings.model_copy(update={
            "BOOTSTRAP_ADMIN_EMAIL": "root@example.com",
            "BOOTSTRAP_ADMIN_PASSWORD": "root-secret",
        })
        service = UserService(users_repo, configured, tokens, notifications)

        created = service.ensure_bootstrap_admin()

        assert created.role == Role.SUPER_ADMIN
        assert created.email_verified
        assert service.ensure_bootstrap_admin() is None
        assert users_repo.count() == 1

    def test_not_configured(self, user_service, users_repo):
        assert user_service.ensure_bootstrap_admin() is None
        assert users_repo.count() == 0

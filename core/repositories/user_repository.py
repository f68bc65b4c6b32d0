# =============================================================================
# core/repositories/user_repository.py - users table
# =============================================================================

from uuid import UUID

from core.models.user import ProfileStatus, Role, User
from lib.utils import normalize_uuid

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    table = "users"
    record_type = User

    def find_by_email(self, email: str) -> User | None:
        return self._find_one("email", email)

    def find_by_username(self, username: str) -> User | None:
        """Case-sensitive exact match."""
        return self._find_one("username", username)

    def find_by_verification_token(self, token: str) -> User | None:
        return self._find_one("verification_token", token)

    def find_by_reset_token(self, token: str) -> User | None:
        return self._find_one("reset_token", token)

    def find_by_email_change_token(self, token: str) -> User | None:
        return self._find_one("email_change_token", token)

    def exists_by_email(self, email: str) -> bool:
        return self._count(lambda q: q.eq("email", email)) > 0

    def exists_by_username(self, username: str, exclude_id: UUID | str | None = None) -> bool:
        def filters(query):
            query = query.eq("username", username)
            if exclude_id is not None:
                query = query.neq("id", normalize_uuid(exclude_id))
            return query

        return self._count(filters) > 0

    def list_users(self, page: int, page_size: int) -> tuple[list[User], int]:
        return self._paginate(page, page_size)

    def list_by_role(self, role: Role, page: int, page_size: int) -> tuple[list[User], int]:
        return self._paginate(page, page_size, lambda q: q.eq("role", role.value))

    def list_pending_profiles(self, page: int, page_size: int) -> tuple[list[User], int]:
        return self._paginate(
            page, page_size,
            lambda q: q.eq("profile_status", ProfileStatus.PENDING_REVIEW.value),
        )

    def count_by_role(self, role: Role) -> int:
        return self._count(lambda q: q.eq("role", role.value))

    def count_pending_profiles(self) -> int:
        return self._count(lambda q: q.eq("profile_status", ProfileStatus.PENDING_REVIEW.value))

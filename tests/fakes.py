# =============================================================================
# tests/fakes.py - In-memory Repositories
# =============================================================================
# Drop-in stand-ins for the Supabase-backed repositories. Rows are stored the
# way postgrest would return them (JSON-ready dicts produced by to_row) and
# re-validated into records on every read, so the record invariants are
# checked on each write just like a real round trip.
# =============================================================================

import threading
from datetime import timedelta
from itertools import count
from typing import Any, Callable
from uuid import UUID, uuid4

from core.models.announcement import Announcement
from core.models.favorite import Favorite
from core.models.model import Model, ModelStatus, UpdateStatus
from core.models.user import ProfileStatus, Role, User
from core.repositories.base import to_row
from lib.utils import utc_now

_clock = count()
_EPOCH = utc_now()


def _timestamp() -> str:
    # Strictly increasing so newest-first ordering is deterministic
    return (_EPOCH + timedelta(milliseconds=next(_clock))).isoformat()


class FakeRepository:
    record_type: type = None

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.lock = threading.Lock()

    def _to_record(self, row: dict[str, Any]):
        return self.record_type.model_validate(row)

    def _select(self, predicate: Callable[[dict], bool] | None = None) -> list[dict]:
        rows = [row for row in self.rows.values() if predicate is None or predicate(row)]
        return sorted(rows, key=lambda row: row["created_at"], reverse=True)

    def _paginate(self, page: int, page_size: int, predicate=None) -> tuple[list, int]:
        rows = self._select(predicate)
        start = (page - 1) * page_size
        return [self._to_record(row) for row in rows[start:start + page_size]], len(rows)

    def find_by_id(self, record_id: UUID | str):
        row = self.rows.get(str(record_id))
        return self._to_record(row) if row is not None else None

    def create(self, data: dict[str, Any]):
        row = to_row(data)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", _timestamp())
        record = self._to_record(row)
        self.rows[row["id"]] = row
        return record

    def update(self, record_id: UUID | str, changes: dict[str, Any]):
        key = str(record_id)
        with self.lock:
            if key not in self.rows:
                return None
            row = {**self.rows[key], **to_row(changes), "updated_at": _timestamp()}
            # Validate before storing: a rejected write leaves the row untouched
            record = self._to_record(row)
            self.rows[key] = row
        return record

    def delete(self, record_id: UUID | str) -> bool:
        return self.rows.pop(str(record_id), None) is not None

    def count(self) -> int:
        return len(self.rows)


class FakeUserRepository(FakeRepository):
    record_type = User

    def _find(self, column: str, value: Any) -> User | None:
        for row in self.rows.values():
            if row.get(column) == value:
                return self._to_record(row)
        return None

    def find_by_email(self, email: str) -> User | None:
        return self._find("email", email)

    def find_by_username(self, username: str) -> User | None:
        return self._find("username", username)

    def find_by_verification_token(self, token: str) -> User | None:
        return self._find("verification_token", token)

    def find_by_reset_token(self, token: str) -> User | None:
        return self._find("reset_token", token)

    def find_by_email_change_token(self, token: str) -> User | None:
        return self._find("email_change_token", token)

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def exists_by_username(self, username: str, exclude_id: UUID | str | None = None) -> bool:
        excluded = str(exclude_id) if exclude_id is not None else None
        return any(
            row["username"] == username and row["id"] != excluded
            for row in self.rows.values()
        )

    def list_users(self, page: int, page_size: int):
        return self._paginate(page, page_size)

    def list_by_role(self, role: Role, page: int, page_size: int):
        return self._paginate(page, page_size, lambda row: row["role"] == role.value)

    def list_pending_profiles(self, page: int, page_size: int):
        return self._paginate(
            page, page_size,
            lambda row: row.get("profile_status") == ProfileStatus.PENDING_REVIEW.value,
        )

    def count_by_role(self, role: Role) -> int:
        return len(self._select(lambda row: row["role"] == role.value))

    def count_pending_profiles(self) -> int:
        return len(self._select(
            lambda row: row.get("profile_status") == ProfileStatus.PENDING_REVIEW.value
        ))


def _is_listed(row: dict) -> bool:
    return row.get("status") == ModelStatus.APPROVED.value and row.get("is_public", True)


class FakeModelRepository(FakeRepository):
    record_type = Model

    def list_public(self, page: int, page_size: int, search: str | None = None):
        def predicate(row):
            if not _is_listed(row):
                return False
            return search is None or search.lower() in row["title"].lower()

        return self._paginate(page, page_size, predicate)

    def list_by_owner(self, owner_id, page: int, page_size: int, listed_only: bool = False):
        def predicate(row):
            if row["user_id"] != str(owner_id):
                return False
            return _is_listed(row) if listed_only else True

        return self._paginate(page, page_size, predicate)

    def list_all_by_owner(self, owner_id, batch_size: int = 1000) -> list[Model]:
        return [self._to_record(row) for row in self._select(lambda row: row["user_id"] == str(owner_id))]

    def list_pending(self, page: int, page_size: int):
        return self._paginate(page, page_size, lambda row: row["status"] == ModelStatus.PENDING.value)

    def list_pending_updates(self, page: int, page_size: int):
        return self._paginate(
            page, page_size,
            lambda row: row["update_status"] == UpdateStatus.PENDING_REVIEW.value,
        )

    def count_by_status(self, status: ModelStatus) -> int:
        return len(self._select(lambda row: row["status"] == status.value))

    def count_pending_updates(self) -> int:
        return len(self._select(lambda row: row["update_status"] == UpdateStatus.PENDING_REVIEW.value))

    def increment_downloads(self, model_id) -> int | None:
        with self.lock:
            row = self.rows.get(str(model_id))
            if row is None:
                return None
            row["downloads"] = row.get("downloads", 0) + 1
            return row["downloads"]

    def sum_downloads(self) -> int:
        return sum(row.get("downloads", 0) for row in self.rows.values())


class FakeFavoriteRepository(FakeRepository):
    record_type = Favorite

    def __init__(self, models: FakeModelRepository):
        super().__init__()
        self._models = models

    def _pair(self, user_id, model_id) -> dict | None:
        for row in self.rows.values():
            if row["user_id"] == str(user_id) and row["model_id"] == str(model_id):
                return row
        return None

    def add(self, user_id, model_id) -> None:
        if self._pair(user_id, model_id) is None:
            self.create({"user_id": user_id, "model_id": model_id})

    def remove(self, user_id, model_id) -> bool:
        row = self._pair(user_id, model_id)
        if row is None:
            return False
        return self.delete(row["id"])

    def exists(self, user_id, model_id) -> bool:
        return self._pair(user_id, model_id) is not None

    def list_for_user(self, user_id, page: int, page_size: int):
        rows = self._select(lambda row: row["user_id"] == str(user_id))
        start = (page - 1) * page_size
        items = [
            self._to_record({**row, "model": self._models.rows.get(row["model_id"])})
            for row in rows[start:start + page_size]
        ]
        return items, len(rows)

    def count_for_model(self, model_id) -> int:
        return len(self._select(lambda row: row["model_id"] == str(model_id)))


class FakeAnnouncementRepository(FakeRepository):
    record_type = Announcement

    def list_active(self) -> list[Announcement]:
        return [self._to_record(row) for row in self._select(lambda row: row.get("is_active", True))]

    def list_all(self, page: int, page_size: int):
        return self._paginate(page, page_size)


# =============================================================================
# Seeding helpers
# =============================================================================

def create_user(
    repo: FakeUserRepository,
    username: str,
    role: Role = Role.USER,
    password_hash: str = "not-a-real-hash",
    **fields,
) -> User:
    return repo.create({
        "email": f"{username}@example.com",
        "username": username,
        "password_hash": password_hash,
        "role": role,
        "profile_status": ProfileStatus.APPROVED,
        **fields,
    })


def create_model(
    repo: FakeModelRepository,
    owner: User,
    title: str = "Cat",
    status: ModelStatus = ModelStatus.PENDING,
    **fields,
) -> Model:
    return repo.create({
        "user_id": owner.id,
        "title": title,
        "file_path": f"{uuid4()}.zip",
        "file_size": 2048,
        "status": status,
        "update_status": UpdateStatus.IDLE,
        "downloads": 0,
        **fields,
    })

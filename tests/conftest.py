# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Builds an explicit Settings instance (no .env file is read)
# - Wires the real services over in-memory repositories
# - Records queued emails instead of sending them
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main and workers.celery_app build their module-level instances from
# get_settings() on import

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import MagicMock

import pytest

import lib.security
from app.config import Settings
from core.models.user import Role
from core.services import (
    AdminService,
    AnnouncementService,
    CatalogService,
    FavoriteService,
    ModelService,
    ModerationService,
    NotificationService,
    StorageService,
    UserService,
)
from lib.security import TokenIssuer
from tests.fakes import (
    FakeAnnouncementRepository,
    FakeFavoriteRepository,
    FakeModelRepository,
    FakeUserRepository,
    create_user,
)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """bcrypt's minimum cost keeps hashing in tests cheap."""
    monkeypatch.setattr(lib.security, "BCRYPT_ROUNDS", 4)


# =============================================================================
# Settings & collaborators
# =============================================================================

@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SUPABASE_URL="https://test-project.supabase.co",
        SUPABASE_SERVICE_KEY="test-service-key",
        JWT_SECRET="test-jwt-secret-0123456789",
        SMTP_HOST="smtp.example.com",
        SMTP_USER="mailer@example.com",
        FRONTEND_URL="https://modelhub.test",
        DEFAULT_PAGE_SIZE=12,
        MAX_PAGE_SIZE=50,
    )


@pytest.fixture
def outbox():
    """(template, recipient, context) of every queued email."""
    return []


@pytest.fixture
def notifications(settings, outbox):
    return NotificationService(
        settings,
        dispatcher=lambda template, recipient, context: outbox.append((template, recipient, context)),
    )


@pytest.fixture
def storage_client():
    """Mocked Supabase client; storage calls succeed unless a test says otherwise."""
    client = MagicMock()
    bucket = client.storage.from_.return_value
    bucket.create_signed_url.return_value = {"signedURL": "https://signed.example/file"}
    bucket.get_public_url.side_effect = lambda path: f"https://test-project.supabase.co/storage/v1/object/public/images/{path}"
    return client


@pytest.fixture
def storage(settings, storage_client):
    return StorageService(settings, storage_client)


@pytest.fixture
def tokens(settings):
    return TokenIssuer(settings)


# =============================================================================
# Repositories
# =============================================================================

@pytest.fixture
def users_repo():
    return FakeUserRepository()


@pytest.fixture
def models_repo():
    return FakeModelRepository()


@pytest.fixture
def favorites_repo(models_repo):
    return FakeFavoriteRepository(models_repo)


@pytest.fixture
def announcements_repo():
    return FakeAnnouncementRepository()


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def moderation(models_repo, users_repo, notifications):
    return ModerationService(models_repo, users_repo, notifications)


@pytest.fixture
def catalog(models_repo, settings):
    return CatalogService(models_repo, settings)


@pytest.fixture
def model_service(models_repo, storage, settings):
    return ModelService(models_repo, storage, settings)


@pytest.fixture
def user_service(users_repo, settings, tokens, notifications):
    return UserService(users_repo, settings, tokens, notifications)


@pytest.fixture
def admin_service(users_repo, models_repo, storage, settings):
    return AdminService(users_repo, models_repo, storage, settings)


@pytest.fixture
def favorite_service(favorites_repo, models_repo, settings):
    return FavoriteService(favorites_repo, models_repo, settings)


@pytest.fixture
def announcement_service(announcements_repo, settings):
    return AnnouncementService(announcements_repo, settings)


# =============================================================================
# Actors
# =============================================================================

@pytest.fixture
def super_admin(users_repo):
    return create_user(users_repo, "root", role=Role.SUPER_ADMIN)


@pytest.fixture
def admin(users_repo):
    return create_user(users_repo, "moderator", role=Role.ADMIN)


@pytest.fixture
def owner(users_repo):
    return create_user(users_repo, "alice")


@pytest.fixture
def other_user(users_repo):
    return create_user(users_repo, "bob")

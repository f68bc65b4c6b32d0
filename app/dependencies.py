# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The chain starts from the Settings instance the app was created with
# (app.state.settings) and builds the Supabase client, repositories and
# services from it. Tests swap any link with app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request
from supabase import Client

from app.config import Settings
from core.repositories import (
    AnnouncementRepository,
    FavoriteRepository,
    ModelRepository,
    UserRepository,
)
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
from lib.supabase_client import SupabaseClient


# =============================================================================
# Settings & Clients
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_supabase_client(settings: SettingsDep) -> Client:
    """
    Get Supabase client instance.

    Returns the process-wide singleton client.
    """
    return SupabaseClient.get_client(settings)


SupabaseDep = Annotated[Client, Depends(get_supabase_client)]


def get_token_issuer(settings: SettingsDep) -> TokenIssuer:
    return TokenIssuer(settings)


TokenIssuerDep = Annotated[TokenIssuer, Depends(get_token_issuer)]


# =============================================================================
# Repositories
# =============================================================================

def get_user_repository(client: SupabaseDep) -> UserRepository:
    return UserRepository(client)


def get_model_repository(client: SupabaseDep) -> ModelRepository:
    return ModelRepository(client)


def get_favorite_repository(client: SupabaseDep) -> FavoriteRepository:
    return FavoriteRepository(client)


def get_announcement_repository(client: SupabaseDep) -> AnnouncementRepository:
    return AnnouncementRepository(client)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
ModelRepoDep = Annotated[ModelRepository, Depends(get_model_repository)]
FavoriteRepoDep = Annotated[FavoriteRepository, Depends(get_favorite_repository)]
AnnouncementRepoDep = Annotated[AnnouncementRepository, Depends(get_announcement_repository)]


# =============================================================================
# Services
# =============================================================================

def get_notification_service(settings: SettingsDep) -> NotificationService:
    return NotificationService(settings)


NotificationDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_storage_service(settings: SettingsDep, client: SupabaseDep) -> StorageService:
    return StorageService(settings, client)


StorageDep = Annotated[StorageService, Depends(get_storage_service)]


def get_moderation_service(
    models: ModelRepoDep,
    users: UserRepoDep,
    notifications: NotificationDep,
) -> ModerationService:
    return ModerationService(models, users, notifications)


def get_catalog_service(models: ModelRepoDep, settings: SettingsDep) -> CatalogService:
    return CatalogService(models, settings)


def get_model_service(
    models: ModelRepoDep,
    storage: StorageDep,
    settings: SettingsDep,
) -> ModelService:
    return ModelService(models, storage, settings)


def get_user_service(
    users: UserRepoDep,
    settings: SettingsDep,
    tokens: TokenIssuerDep,
    notifications: NotificationDep,
) -> UserService:
    return UserService(users, settings, tokens, notifications)


def get_admin_service(
    users: UserRepoDep,
    models: ModelRepoDep,
    storage: StorageDep,
    settings: SettingsDep,
) -> AdminService:
    return AdminService(users, models, storage, settings)


def get_favorite_service(
    favorites: FavoriteRepoDep,
    models: ModelRepoDep,
    settings: SettingsDep,
) -> FavoriteService:
    return FavoriteService(favorites, models, settings)


def get_announcement_service(
    announcements: AnnouncementRepoDep,
    settings: SettingsDep,
) -> AnnouncementService:
    return AnnouncementService(announcements, settings)


ModerationDep = Annotated[ModerationService, Depends(get_moderation_service)]
CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
ModelServiceDep = Annotated[ModelService, Depends(get_model_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
FavoriteServiceDep = Annotated[FavoriteService, Depends(get_favorite_service)]
AnnouncementServiceDep = Annotated[AnnouncementService, Depends(get_announcement_service)]

# =============================================================================
# tests/test_model_service.py - Model Lifecycle and File Cleanup Tests
# =============================================================================
# Run with: pytest tests/test_model_service.py -v
# =============================================================================

import pytest

from app.exceptions import NotFoundError, UnauthorizedError
from core.models.model import ModelCreate, ModelPatch, ModelStatus, UpdateStatus
from tests.fakes import create_model


class TestCreate:
    def test_new_model_is_pending_and_idle(self, model_service, owner):
        model = model_service.create(owner, ModelCreate(
            title="Cat",
            file_path="abc.zip",
            file_size=1024,
            tags=[" cute ", "cat", "cute", ""],
        ))

        assert model.user_id == owner.id
        assert model.status == ModelStatus.PENDING
        assert model.update_status == UpdateStatus.IDLE
        assert model.pending_changes is None
        assert model.downloads == 0
        assert model.tags == ["cute", "cat"]

    def test_admin_models_also_start_pending(self, model_service, admin):
        model = model_service.create(admin, ModelCreate(title="Official", file_path="o.zip"))

        assert model.status == ModelStatus.PENDING

    def test_moderation_queues(self, model_service, moderation, models_repo, owner):
        pending = model_service.create(owner, ModelCreate(title="New", file_path="n.zip"))
        published = create_model(models_repo, owner, status=ModelStatus.APPROVED)
        moderation.propose_model_edit(published.id, owner, ModelPatch(title="Edited"))

        assert [m.id for m in model_service.list_pending().items] == [pending.id]
        assert [m.id for m in model_service.list_pending_updates().items] == [published.id]


class TestDelete:
    def test_owner_deletes_model_and_files(self, model_service, models_repo, storage_client, owner):
        model = create_model(models_repo, owner, file_path="abc.zip", image_url="preview.png")

        result = model_service.delete(model.id, owner)

        assert result.deleted_id == model.id
        assert result.cleanup.ok
        assert sorted(result.cleanup.attempted) == ["abc.zip", "preview.png"]
        assert models_repo.find_by_id(model.id) is None
        storage_client.storage.from_.assert_any_call("models")
        storage_client.storage.from_.assert_any_call("images")

    def test_admin_can_delete(self, model_service, models_repo, owner, admin):
        model = create_model(models_repo, owner)

        model_service.delete(model.id, admin)

        assert models_repo.find_by_id(model.id) is None

    def test_stranger_cannot_delete(self, model_service, models_repo, storage_client, owner, other_user):
        model = create_model(models_repo, owner)

        with pytest.raises(UnauthorizedError):
            model_service.delete(model.id, other_user)

        assert models_repo.find_by_id(model.id) is not None
        storage_client.storage.from_.return_value.remove.assert_not_called()

    def test_storage_failure_does_not_block_deletion(self, model_service, models_repo, storage_client, owner):
        model = create_model(models_repo, owner, file_path="abc.zip")
        storage_client.storage.from_.return_value.remove.side_effect = RuntimeError("storage down")

        result = model_service.delete(model.id, owner)

        assert models_repo.find_by_id(model.id) is None
        assert not result.cleanup.ok
        assert result.cleanup.failed == ["abc.zip"]

    def test_staged_files_are_removed_too(self, model_service, moderation, models_repo, owner):
        model = create_model(models_repo, owner, file_path="old.zip", status=ModelStatus.APPROVED)
        moderation.propose_model_edit(model.id, owner, ModelPatch(file_path="new.zip"))

        result = model_service.delete(model.id, owner)

        assert sorted(result.cleanup.attempted) == ["new.zip", "old.zip"]

    def test_external_image_is_left_alone(self, model_service, models_repo, owner):
        model = create_model(
            models_repo, owner,
            file_path="abc.zip",
            image_url="https://cdn.elsewhere.example/cat.png",
        )

        result = model_service.delete(model.id, owner)

        assert result.cleanup.attempted == ["abc.zip"]

    def test_own_public_url_is_mapped_to_path(self, model_service, models_repo, owner):
        model = create_model(
            models_repo, owner,
            file_path="abc.zip",
            image_url="https://test-project.supabase.co/storage/v1/object/public/images/p.png",
        )

        result = model_service.delete(model.id, owner)

        assert sorted(result.cleanup.attempted) == ["abc.zip", "p.png"]

    def test_unknown_model(self, model_service, owner):
        with pytest.raises(NotFoundError):
            model_service.delete("00000000-0000-0000-0000-000000000000", owner)

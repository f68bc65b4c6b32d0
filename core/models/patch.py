# =============================================================================
# core/models/patch.py - Pending Change Patches
# =============================================================================
# A patch is a partial record of proposed field updates. Each field is either
# present (carries a non-null value) or absent (null). Patches are stored
# inline on the owning entity while they await review and are materialized
# through apply_patch(), which both the model and profile flows share.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict


class Patch(BaseModel):
    """
    Base class for per-entity patches.

    Subclasses declare every field as optional with a None default.
    Field names must match the live field they update.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    def changes(self) -> dict[str, Any]:
        """Present fields only, keyed by live field name."""
        return {name: value for name, value in self if value is not None}

    def is_empty(self) -> bool:
        return not self.changes()

    def to_storage(self) -> dict[str, Any]:
        """JSON-ready form for the pending_changes column."""
        return self.model_dump(mode="json", exclude_none=True)


def apply_patch(patch: Patch | None, **state: Any) -> dict[str, Any]:
    """
    Build one update that writes every present field of a patch.

    Extra keyword arguments are merged in after the patch fields, so the
    caller can reset review state in the same write.

    Example:
        apply_patch(model.pending_changes, pending_changes=None, update_status="idle")
        # {"title": "New", "pending_changes": None, "update_status": "idle"}
    """
    update = patch.changes() if patch is not None else {}
    update.update(state)
    return update

"""Stage dependency engine.

A ``DependencyIndex`` is built once per request from a project's stages and
edges and answers prerequisite/dependent lookups without rescanning the edge
list. The gate only considers prerequisites that share the target stage's
``item_id``; edges between different items are stored but do not block.
"""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from src.erp.core.exceptions import DependencyBlockedError
from src.erp.models import ProjectStage, StageDependency, StageStatus


class DependencyIndex:
    """In-memory index of stages and their dependency edges."""

    def __init__(self, stages: Iterable[ProjectStage], edges: Iterable[StageDependency]):
        self.stages: dict[UUID, ProjectStage] = {stage.id: stage for stage in stages}
        self._prerequisites: dict[UUID, list[UUID]] = defaultdict(list)
        self._dependents: dict[UUID, list[UUID]] = defaultdict(list)
        for edge in edges:
            self._prerequisites[edge.stage_id].append(edge.depends_on_stage_id)
            self._dependents[edge.depends_on_stage_id].append(edge.stage_id)

    def prerequisites_of(self, stage_id: UUID) -> list[UUID]:
        """Ids of stages that ``stage_id`` depends on, in edge order."""
        return list(self._prerequisites.get(stage_id, ()))

    def dependents_of(self, stage_id: UUID) -> list[UUID]:
        """Ids of stages that list ``stage_id`` as a prerequisite."""
        return list(self._dependents.get(stage_id, ()))

    def incomplete_prerequisites(self, stage_id: UUID) -> list[ProjectStage]:
        """Same-item prerequisites of ``stage_id`` that are not completed yet."""
        target = self.stages.get(stage_id)
        if target is None:
            return []

        blocking = []
        for prerequisite_id in self.prerequisites_of(stage_id):
            prerequisite = self.stages.get(prerequisite_id)
            if prerequisite is None or prerequisite.item_id != target.item_id:
                continue
            if prerequisite.status != StageStatus.COMPLETED.value:
                blocking.append(prerequisite)
        return blocking

    def can_start(self, stage_id: UUID) -> bool:
        return not self.incomplete_prerequisites(stage_id)

    def check_transition(self, stage_id: UUID, new_status: str | None) -> None:
        """Raise DependencyBlockedError if ``stage_id`` may not move to ``new_status``.

        Moving to pending (or not changing the status at all) is never gated.
        """
        if new_status is None or new_status == StageStatus.PENDING.value:
            return
        blocking = self.incomplete_prerequisites(stage_id)
        if blocking:
            raise DependencyBlockedError([stage.name for stage in blocking])

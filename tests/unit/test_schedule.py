"""Tests for delay, critical path and timeline views."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from src.erp.models import ProjectStage, StageDependency, StageStatus
from src.erp.services import DependencyIndex
from src.erp.services.schedule import (
    build_process_overview,
    build_timeline,
    calculate_delay,
    find_critical_path,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 10, 12, 0, 0)
PROJECT_ID = uuid4()


def _stage(name: str, status: StageStatus = StageStatus.PENDING, **kwargs) -> ProjectStage:
    return ProjectStage(
        id=uuid4(), project_id=PROJECT_ID, name=name, status=status.value, **kwargs
    )


class TestCalculateDelay:
    def test_in_progress_past_planned_end(self):
        stage = _stage("Cut", StageStatus.IN_PROGRESS, planned_end_date=NOW - timedelta(days=2))
        assert calculate_delay(stage, NOW) == 2

    def test_partial_days_round_up(self):
        stage = _stage(
            "Cut", StageStatus.IN_PROGRESS, planned_end_date=NOW - timedelta(days=1, hours=1)
        )
        assert calculate_delay(stage, NOW) == 2

    def test_not_yet_due(self):
        stage = _stage("Cut", StageStatus.IN_PROGRESS, planned_end_date=NOW + timedelta(days=1))
        assert calculate_delay(stage, NOW) == 0

    def test_pending_and_completed_are_never_delayed(self):
        past = NOW - timedelta(days=5)
        assert calculate_delay(_stage("A", StageStatus.PENDING, planned_end_date=past), NOW) == 0
        assert calculate_delay(_stage("B", StageStatus.COMPLETED, planned_end_date=past), NOW) == 0

    def test_no_planned_end(self):
        assert calculate_delay(_stage("A", StageStatus.IN_PROGRESS), NOW) == 0


class TestCriticalPath:
    def test_delayed_stage_and_direct_dependents_only(self):
        late = _stage("Cut", StageStatus.IN_PROGRESS, planned_end_date=NOW - timedelta(days=1))
        next_stage = _stage("Glue")
        after_next = _stage("Paint")
        edges = [
            StageDependency(stage_id=next_stage.id, depends_on_stage_id=late.id),
            StageDependency(stage_id=after_next.id, depends_on_stage_id=next_stage.id),
        ]
        stages = [late, next_stage, after_next]
        index = DependencyIndex(stages, edges)

        assert find_critical_path(stages, index, NOW) == {late.id, next_stage.id}

    def test_overview_stats(self):
        late = _stage("Cut", StageStatus.IN_PROGRESS, planned_end_date=NOW - timedelta(days=3))
        done = _stage("Sand", StageStatus.COMPLETED)
        waiting = _stage("Glue")
        edges = [StageDependency(stage_id=waiting.id, depends_on_stage_id=late.id)]
        stages = [late, done, waiting]

        overview = build_process_overview(
            PROJECT_ID, stages, DependencyIndex(stages, edges), NOW
        )

        assert overview.critical_path == [late.id, waiting.id]
        assert overview.stats.total == 3
        assert overview.stats.completed == 1
        assert overview.stats.in_progress == 1
        assert overview.stats.delayed == 1
        assert overview.stats.total_delay_days == 3
        rows = {row.name: row for row in overview.stages}
        assert rows["Glue"].prerequisites == [late.id]
        assert rows["Cut"].dependents == [waiting.id]
        assert rows["Sand"].on_critical_path is False


class TestTimeline:
    def test_delay_and_final_deadline(self):
        planned = NOW - timedelta(days=4)
        finished_late = _stage(
            "Cut",
            StageStatus.COMPLETED,
            planned_end_date=planned,
            actual_end_date=planned + timedelta(days=2),
        )
        upcoming = _stage("Paint", planned_end_date=NOW + timedelta(days=7))
        open_ended = _stage("Pack")

        timeline = build_timeline(PROJECT_ID, [finished_late, upcoming, open_ended])

        delays = {row.name: row.delay_days for row in timeline.stages}
        assert delays == {"Cut": 2, "Paint": None, "Pack": None}
        assert timeline.stats.final_deadline == NOW + timedelta(days=7)
        assert timeline.stats.total == 3
        assert timeline.stats.completed == 1
        assert timeline.stats.pending == 2

    def test_empty(self):
        timeline = build_timeline(PROJECT_ID, [])
        assert timeline.stages == []
        assert timeline.stats.final_deadline is None

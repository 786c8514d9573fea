"""Stage Merge Manager - per-stage shot sets with whole-stage replace."""

import logging
import threading
from collections.abc import Sequence

from ..exceptions import EmptyShotSetError
from ..models.entries import FunnelStage, ShotAnalysisEntry

logger = logging.getLogger(__name__)


class StageMergeManager:
    """Owns the FunnelStage -> shots mapping for one user session.

    Submitting for a stage replaces that stage's shots in full; other stages
    are never touched. Writes are serialized so parallel submissions for
    different stages cannot lose each other's update.

    Usage:
        stages = StageMergeManager()
        stages.submit(FunnelStage.TOF, tof_shots)
        shots = stages.current_shots()
    """

    def __init__(self) -> None:
        self._shots: dict[FunnelStage, tuple[ShotAnalysisEntry, ...]] = {}
        self._lock = threading.Lock()

    def submit(self, stage: FunnelStage, shots: Sequence[ShotAnalysisEntry]) -> None:
        """Replace the stored shots for `stage` and mark it populated.

        Raises:
            EmptyShotSetError: If `shots` is empty.
            ValueError: If any shot is tagged with a different stage.
        """
        if not shots:
            raise EmptyShotSetError(f"Cannot submit an empty shot set for {stage.value}.")

        foreign = [s.shot_id for s in shots if s.funnel_stage != stage]
        if foreign:
            raise ValueError(f"Shots {foreign} do not belong to stage {stage.value}")

        with self._lock:
            replaced = stage in self._shots
            self._shots[stage] = tuple(shots)

        logger.info(
            "%s %s with %d shots", "Replaced" if replaced else "Loaded", stage.value, len(shots)
        )

    def clear(self, stage: FunnelStage) -> None:
        """Remove a stage's shots; other stages are unaffected."""
        with self._lock:
            removed = self._shots.pop(stage, None)
        if removed is not None:
            logger.info("Cleared %s (%d shots)", stage.value, len(removed))

    def clear_all(self) -> None:
        with self._lock:
            self._shots.clear()

    def current_shots(self) -> list[ShotAnalysisEntry]:
        """Concatenate populated stages in TOF, MOF, BOF order."""
        snapshot = dict(self._shots)
        return [shot for stage in FunnelStage for shot in snapshot.get(stage, ())]

    def shots_for(self, stage: FunnelStage) -> list[ShotAnalysisEntry]:
        return list(self._shots.get(stage, ()))

    def is_populated(self, stage: FunnelStage) -> bool:
        return stage in self._shots

    def available_stages(self) -> list[FunnelStage]:
        return [stage for stage in FunnelStage if stage in self._shots]

    def missing_stages(self) -> list[FunnelStage]:
        """Stages with no data, reported downstream as gaps."""
        return [stage for stage in FunnelStage if stage not in self._shots]

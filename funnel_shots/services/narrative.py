"""Build the narrative hand-off payload and validate what comes back."""

import logging
from collections.abc import Sequence
from typing import TypeVar

import polars as pl
from pydantic import BaseModel, ValidationError

from ..exceptions import EmptyShotSetError, NarrativeResponseError
from ..models.entries import METRIC_FIELDS, FunnelStage, ShotAnalysisEntry
from ..models.narrative import NarrativeRequest
from ..settings import DailyPerformanceSchema

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

SENTINEL_REPLIES = {"undefined", "null", "error", "failure"}


def shots_to_csv(shots: Sequence[ShotAnalysisEntry], schema: DailyPerformanceSchema) -> str:
    """Render shots as a CSV block with display labels as metric headers."""
    df = pl.DataFrame(
        {
            "SHOT_ID": [s.shot_id for s in shots],
            "START_DATE": [s.start_date for s in shots],
            "END_DATE": [s.end_date for s in shots],
            "FUNNEL_STAGE": [s.funnel_stage.value for s in shots],
            "NUM_DAYS_IN_SHOT": [s.num_days_in_shot for s in shots],
            **{schema.label_for(m): [float(getattr(s, m)) for s in shots] for m in METRIC_FIELDS},
        },
        schema_overrides={"NUM_DAYS_IN_SHOT": pl.Int64},
    )
    return df.write_csv().strip()


def build_narrative_request(
    shots: Sequence[ShotAnalysisEntry],
    strategy: str,
    schema: DailyPerformanceSchema,
) -> NarrativeRequest:
    """Segregate shots into one CSV block per stage present in the data.

    Raises:
        EmptyShotSetError: If there are no shots.
        ValueError: If the strategy description is blank.
    """
    if not shots:
        raise EmptyShotSetError("No shot data provided for analysis.")
    if not strategy.strip():
        raise ValueError("A strategy description is required for analysis.")

    available = [stage for stage in FunnelStage if any(s.funnel_stage == stage for s in shots)]
    missing = [stage for stage in FunnelStage if stage not in available]

    blocks = {
        stage: shots_to_csv([s for s in shots if s.funnel_stage == stage], schema)
        for stage in available
    }

    return NarrativeRequest(
        strategy=strategy.strip(),
        available_stages=available,
        missing_stages=missing,
        stage_blocks=blocks,
        total_shots=len(shots),
    )


def parse_narrative_response(text: str | None, model: type[ResponseModel]) -> ResponseModel:
    """Validate the generator's JSON reply against `model`.

    Raises:
        NarrativeResponseError: Empty or sentinel reply, malformed JSON, or a
            payload that does not match the model.
    """
    if text is None:
        raise NarrativeResponseError("Narrative generator returned no text content.")

    trimmed = text.strip()
    if not trimmed:
        raise NarrativeResponseError("Narrative generator returned an empty response.")

    lowered = trimmed.lower()
    if lowered in SENTINEL_REPLIES or '"error"' in lowered:
        raise NarrativeResponseError(
            f"Narrative generator returned an error response: {trimmed[:200]}"
        )

    try:
        return model.model_validate_json(trimmed)
    except ValidationError as e:
        logger.warning("Narrative response failed validation: %s", e)
        raise NarrativeResponseError(
            f"Narrative response did not match {model.__name__}: {e.error_count()} error(s)"
        ) from e

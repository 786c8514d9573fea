from .narrative import build_narrative_request, parse_narrative_response, shots_to_csv
from .session import AnalysisSession
from .stage_store import StageMergeManager

__all__ = [
    "AnalysisSession",
    "StageMergeManager",
    "build_narrative_request",
    "parse_narrative_response",
    "shots_to_csv",
]

from .loader import StageUpload, UploadPipeline, decode_upload, read_upload
from .template import build_csv_template
from .validator import (
    PLAUSIBILITY_RULES,
    PlausibilityRule,
    SchemaValidator,
)

__all__ = [
    "PLAUSIBILITY_RULES",
    "PlausibilityRule",
    "SchemaValidator",
    "StageUpload",
    "UploadPipeline",
    "build_csv_template",
    "decode_upload",
    "read_upload",
]

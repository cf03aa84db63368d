# org_analysis/config/models.py
"""
Pydantic models for validating the run settings loaded from YAML files.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path("output_dev/analysis_logs")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AnalysisSettings(BaseModel):
    """Operational settings for one analysis run. Pay policy is not configurable."""

    batch_size: int = Field(
        10_000, ge=1, description="Largest number of roster lines parsed as one task"
    )
    max_workers: Optional[int] = Field(
        None, ge=1, description="Worker pool size; None sizes it to the CPU count"
    )
    log_level: str = Field("INFO", description="Root log level name")
    log_dir: Path = Field(DEFAULT_LOG_DIR, description="Directory for log files")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level '{value}', expected one of {VALID_LOG_LEVELS}")
        return level

    def with_overrides(self, **overrides: Any) -> "AnalysisSettings":
        """Copy with every non-None override applied (e.g. command-line options)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        # Re-validate instead of model_copy(update=...) so overrides are checked too
        return AnalysisSettings(**{**self.model_dump(), **updates})

"""
Per-invocation processing context.

The caller creates one ProcessingContext per document and passes it through the
pipeline; nothing here is shared between invocations.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from cv_autofill.core.config import Settings, get_settings
from cv_autofill.core.errors import CVProcessingError, ProcessingTimeoutError

logger = logging.getLogger(__name__)

MAX_ERROR_LOG_SIZE = 50


@dataclass
class ProcessingContext:
    settings: Settings = field(default_factory=get_settings)
    deadline: Optional[float] = None  # time.monotonic() value
    budget_seconds: Optional[float] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[CVProcessingError] = field(default_factory=list)
    sections_found: Set[str] = field(default_factory=set)

    @classmethod
    def with_budget(cls, seconds: Optional[float], settings: Optional[Settings] = None) -> "ProcessingContext":
        ctx = cls(settings=settings or get_settings())
        if seconds is not None:
            ctx.budget_seconds = seconds
            ctx.deadline = time.monotonic() + seconds
        return ctx

    def check_deadline(self, stage: str) -> None:
        """Raise ProcessingTimeoutError once the wall-clock budget is spent."""
        if self.deadline is None:
            return
        if time.monotonic() > self.deadline:
            error = ProcessingTimeoutError(
                f"Processing timeout: budget of {self.budget_seconds:.1f}s exceeded during {stage}",
                details=f"stage: {stage}",
            )
            self.record_error(error)
            raise error

    def record_error(self, error: CVProcessingError) -> None:
        self.errors.append(error)
        if len(self.errors) > MAX_ERROR_LOG_SIZE:
            del self.errors[0]
        logger.warning("CV processing error %s: %s", error.code.value, error.message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.debug("warning recorded: %s", message)

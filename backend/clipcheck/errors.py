"""Exception taxonomy for ClipCheck

Pre-flight errors (raised before a pipeline run starts):
    InsufficientResources, InvalidAnalysisText, AnalysisInProgress

Inference errors (raised inside a single agent call, caught only by the
pipeline coordinator):
    InferenceUnavailable, InferenceTimeout, InferenceRequestFailed,
    InferenceResponseMalformed

Pipeline outcomes:
    SpecialistNotFound (skipped), AnalysisAborted (degraded result),
    AnalysisCancelled (cooperative cancel)
"""

from typing import Optional


class ClipCheckError(Exception):
    """Base exception for all ClipCheck errors"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


# Pre-flight errors


class InsufficientResources(ClipCheckError):
    """Raised when system memory is critically low before analysis starts"""

    def __init__(self, message: str, free_memory_bytes: Optional[int] = None):
        super().__init__(message)
        self.free_memory_bytes = free_memory_bytes


class InvalidAnalysisText(ClipCheckError):
    """Raised when the submitted text is missing, blank or too long"""


class AnalysisInProgress(ClipCheckError):
    """Raised when an analysis is requested while another one is running"""

    def __init__(self, message: str = "An analysis is already in progress"):
        super().__init__(message)


# Inference errors


class InferenceError(ClipCheckError):
    """Base class for failures of a single inference call"""


class InferenceUnavailable(InferenceError):
    """The inference server could not be reached"""


class InferenceTimeout(InferenceError):
    """The inference call exceeded its per-call timeout"""


class InferenceRequestFailed(InferenceError):
    """The inference server answered with a non-2xx status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InferenceResponseMalformed(InferenceError):
    """The response content was not valid JSON or did not match the schema"""

    def __init__(self, message: str, content: Optional[str] = None):
        super().__init__(message)
        self.content = content


# Pipeline outcomes


class SpecialistNotFound(ClipCheckError):
    """An orchestrator-selected specialist id is not in the registry"""

    def __init__(self, specialist_id: str):
        super().__init__(f"Specialist '{specialist_id}' not found")
        self.specialist_id = specialist_id


class AnalysisAborted(ClipCheckError):
    """A pipeline run failed and was converted into a degraded result"""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(f"Analysis aborted during {stage}: {cause}")
        self.stage = stage
        self.cause = cause


class AnalysisCancelled(ClipCheckError):
    """A pipeline run was cancelled between stages"""

    def __init__(self, stage: str):
        super().__init__(f"Analysis cancelled before {stage}")
        self.stage = stage

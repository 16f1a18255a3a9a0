"""
Error taxonomy for the media assembly core.

Per-item errors (malformed cues, exhausted batch tasks) are recovered and
reported structurally. Process-level and upload errors are fatal to the
enclosing assembly job and carry the external tool's diagnostics.
"""

from typing import List, Optional


class StudioAssemblyError(Exception):
    """Base class for all errors raised by the assembly core."""
    pass


class MalformedInput(StudioAssemblyError):
    """Raised when a single input unit cannot be parsed. The unit is skipped."""
    pass


class MalformedCueError(MalformedInput):
    """Raised when an SRT block has a bad index, timestamp or duration."""

    def __init__(self, reason: str, block: str = ""):
        self.reason = reason
        self.block = block
        super().__init__(reason)


class TaskFailure(StudioAssemblyError):
    """A batch task exhausted its retry attempts."""

    def __init__(self, index: int, attempts: int, last_error: BaseException):
        self.index = index
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Task {index} failed after {attempts} attempt(s): {last_error}"
        )


class DeadlineExceeded(StudioAssemblyError):
    """A batch task had not settled when the overall deadline expired."""

    def __init__(self, index: int, deadline: float):
        self.index = index
        self.deadline = deadline
        super().__init__(f"Task {index} did not settle within {deadline}s")


class PartialBatchFailure(StudioAssemblyError):
    """Some items of a batch failed. Successful items are still available."""

    def __init__(self, failures: List[TaskFailure], total: int):
        self.failures = failures
        self.total = total
        super().__init__(f"{len(failures)}/{total} batch tasks failed")

    @property
    def failed_indices(self) -> List[int]:
        return [f.index for f in self.failures]


class AssemblyError(StudioAssemblyError):
    """Base class for audio assembly job failures."""
    pass


class ChunkDownloadError(AssemblyError):
    """A remote audio chunk could not be downloaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download chunk from {url}: {reason}")


class MediaToolNotFound(AssemblyError):
    """Raised when ffmpeg or ffprobe cannot be started."""
    pass


class ExternalProcessFailure(AssemblyError):
    """The external media tool exited with a non-zero status."""

    def __init__(self, tool: str, returncode: Optional[int], diagnostics: str = ""):
        self.tool = tool
        self.returncode = returncode
        self.diagnostics = diagnostics
        message = f"{tool} failed with exit code {returncode}"
        if diagnostics:
            message += f"\n{diagnostics}"
        super().__init__(message)


class UploadFailure(AssemblyError):
    """The assembled artifact could not be stored durably."""

    def __init__(self, destination: str, reason: Optional[str] = None):
        self.destination = destination
        self.reason = reason
        super().__init__(f"Upload to '{destination}' failed: {reason or 'unknown error'}")


class ProviderNotConfigured(StudioAssemblyError):
    """No provider client is registered for a request variant."""
    pass


class RenderServiceError(StudioAssemblyError):
    """The rendering service could not be reached or returned an error."""
    pass


class InvalidTimelineError(StudioAssemblyError):
    """Timeline inputs that cannot produce a renderable timeline."""
    pass


class RenderSubmissionError(RenderServiceError):
    """The rendering service rejected a timeline submission."""
    pass


class SpeechGenerationError(StudioAssemblyError):
    """A speech provider returned no audio for a chunk."""

    def __init__(self, provider: str, reason: Optional[str] = None):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} speech generation failed: {reason or 'no audio returned'}")

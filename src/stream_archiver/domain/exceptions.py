"""Domain-specific exceptions for the stream archiver."""

from typing import Optional


class ArchiverError(Exception):
    """Base exception for all stream archiver errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(ArchiverError):
    """Raised when the configuration file is missing or invalid."""

    pass


class AuthenticationError(ArchiverError):
    """Raised when platform credentials are missing or rejected."""

    pass


class APIError(ArchiverError):
    """Raised when a metadata API request fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, cause)
        self.status_code = status_code


class MalformedResponseError(APIError):
    """Raised when an API response cannot be deserialized."""

    pass


class ChannelNotFoundError(ArchiverError):
    """Raised when a channel token resolves to no channel."""

    def __init__(self, channel: str, cause: Optional[Exception] = None) -> None:
        message = f"Channel not found: {channel}"
        super().__init__(message, cause)
        self.channel = channel


class NoMatchesError(ArchiverError):
    """Raised when no input token matched any identifier pattern."""

    def __init__(self, message: str = "No valid ids found in <INPUT>") -> None:
        super().__init__(message)


class EmptyResultError(ArchiverError):
    """Raised when a valid request produced no usable records."""

    pass


class AlreadyExistsError(ArchiverError):
    """Raised when a stage artifact is already on disk."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Already exists: {filename}")
        self.filename = filename


class ExpectedNoOpError(ArchiverError):
    """Raised by stages that are intentionally not implemented for a platform."""

    def __init__(self, stage: str = "stage") -> None:
        super().__init__(f"Not attempted: {stage}")
        self.stage = stage


class NoChatFoundError(ArchiverError):
    """Raised when chat processing runs without a downloaded chat file."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"No chat found: {filename}")
        self.filename = filename


class MissingProgramError(ArchiverError):
    """Raised when a required external program is not installed."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Missing program: {program}")
        self.program = program


class CommandFailedError(ArchiverError):
    """Raised when an external program exits unsuccessfully."""

    def __init__(
        self,
        program: str,
        returncode: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        message = f"Command failed: {program}"
        if returncode is not None:
            message = f"{message} (exit status {returncode})"
        super().__init__(message, cause)
        self.program = program
        self.returncode = returncode


class HookError(ArchiverError):
    """Raised when a post-stage hook command fails."""

    def __init__(self, stage: str, reason: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Hook for {stage} failed: {reason}", cause)
        self.stage = stage
        self.reason = reason

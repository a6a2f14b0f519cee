"""External program integration."""

from stream_archiver.infrastructure.external.programs import (
    REQUIRED_PROGRAMS,
    ExternalProgram,
    find_missing,
    run_program,
)

__all__ = [
    "ExternalProgram",
    "REQUIRED_PROGRAMS",
    "find_missing",
    "run_program",
]

"""Per-package update failures.

The download, verify and install primitives raise these. The orchestrator
catches any exception at the per-package boundary, so an unexpected error
from a primitive fails only that package. Faults outside that boundary,
such as reading the pending list, reach the update worker.
"""


class UpdateError(RuntimeError):
    """Base class for a failure that only affects one package."""


class DownloadError(UpdateError):
    """The package archive could not be fetched."""


class ChecksumMismatchError(UpdateError):
    """The downloaded archive does not match any expected digest."""

    def __init__(self, name: str, actual: str, expected: tuple[str, ...]):
        self.name = name
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Checksum mismatch for {name}: got {actual[:16]}..., "
            f"expected one of {', '.join(e[:16] + '...' for e in expected) or 'nothing'}"
        )


class InstallError(UpdateError):
    """The downloaded archive could not be put in place."""

"""Error kinds raised while generating beacon fixtures."""

from typing import Any, Optional


class FixtureError(Exception):
    """Base error for a fixture generation run.

    ``stage`` and ``spec`` are filled in by the pipeline so the failure can be
    logged with the context it happened in.
    """

    def __init__(self, message: str, stage: Optional[str] = None, spec: Optional[str] = None):
        self.message = message
        self.stage = stage
        self.spec = spec
        super().__init__(message)


class ConfigurationError(FixtureError):
    """Missing or invalid spec, endpoint or relay config."""


class NetworkError(FixtureError):
    """A protocol client call failed."""


class ConsistencyError(FixtureError):
    """Two artifacts disagree on sync period or slot ordering."""

    def __init__(self, message: str, left: Any, right: Any, **kwargs):
        self.left = left
        self.right = right
        super().__init__(message, **kwargs)


class FixtureIOError(FixtureError):
    """Creating or writing an output file failed."""


class EncodingError(FixtureError):
    """An artifact could not be serialized."""

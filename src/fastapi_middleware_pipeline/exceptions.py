"""PipelineException hierarchy for contract violations and controlled aborts."""

from __future__ import annotations


class PipelineException(Exception):
    """Base for all pipeline exceptions."""


class ResponseAlreadyStarted(PipelineException):
    """The response was finalized; headers and status are frozen."""

    def __init__(self, detail: str = "Response has already started") -> None:
        super().__init__(detail)
        self.detail = detail


class DuplicateHeader(PipelineException):
    """A header was added twice without an explicit overwrite."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Header '{name}' is already set")
        self.name = name


class NextCalledTwice(PipelineException):
    """A stage invoked the remainder of the chain more than once."""

    def __init__(self, stage_name: str) -> None:
        super().__init__(f"Stage '{stage_name}' called next more than once")
        self.stage_name = stage_name


class StageAbort(PipelineException):
    """Controlled short-circuit with HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class ConfigurationError(Exception):
    """Application settings could not be loaded."""

"""Exceptions raised by the headcount analytics engine."""

from __future__ import annotations


class HeadcountAnalyticsError(Exception):
    """Base exception for headcount analytics errors."""


class NotFoundError(HeadcountAnalyticsError):
    """Raised when an organization or process id does not resolve.

    Attributes:
        resource: Kind of record that was looked up ("organization", "process").
        resource_id: The id that did not resolve.
    """

    def __init__(self, resource: str, resource_id: int, organization_id: int | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.organization_id = organization_id
        msg = f"{resource.capitalize()} {resource_id} not found"
        if organization_id is not None and resource != "organization":
            msg += f" in organization {organization_id}"
        super().__init__(msg)


class DataAccessError(HeadcountAnalyticsError):
    """Raised when the underlying storage call fails or times out."""


class PartialComputationError(HeadcountAnalyticsError):
    """One process's pipeline failed during a multi-process rollup.

    Attributes:
        process_id: The process whose analytics could not be computed.
        process_name: Its display name.
        cause: The exception that aborted the pipeline.
    """

    def __init__(self, process_id: int, process_name: str, cause: BaseException) -> None:
        self.process_id = process_id
        self.process_name = process_name
        self.cause = cause
        super().__init__(f"Headcount analytics failed for process {process_id} ({process_name}): {cause}")


DATA_UNAVAILABLE_MESSAGE = "Headcount data is temporarily unavailable"
INTERNAL_ERROR_MESSAGE = "Internal error"


def client_message(exc: BaseException) -> str:
    """Message safe to return to API clients for ``exc``.

    Driver messages and SQL text never leave the service; the full cause is
    only logged.
    """
    if isinstance(exc, NotFoundError):
        return str(exc)
    if isinstance(exc, DataAccessError):
        return DATA_UNAVAILABLE_MESSAGE
    return INTERNAL_ERROR_MESSAGE

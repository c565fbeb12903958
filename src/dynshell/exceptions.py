"""Exceptions for dynshell."""

from typing import Any

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class DynShellError(Exception):
    """
    Base exception for all dynshell errors.

    All exceptions raised by the shell core inherit from this class,
    allowing the command loop to report them with a single except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Remote Exceptions
# ---------------------------------------------------------------------------


class RemoteServiceError(DynShellError):
    """
    Raised when a DynamoDB or CloudWatch call is rejected or fails in transport.

    Covers not-found tables, throttling, validation errors and connectivity
    problems. The underlying botocore exception is kept as ``__cause__``.

    Attributes:
        operation: Name of the remote operation (e.g., "Scan")
        code: Service error code (e.g., "ResourceNotFoundException"),
            or None for transport failures
        message: Human-readable error message
    """

    def __init__(
        self,
        operation: str,
        message: str,
        code: str | None = None,
    ) -> None:
        self.operation = operation
        self.code = code
        self.message = message
        if code:
            super().__init__(f"{operation} failed ({code}): {message}")
        else:
            super().__init__(f"{operation} failed: {message}")

    @classmethod
    def from_client_error(cls, operation: str, error: Any) -> "RemoteServiceError":
        """Build from a botocore ClientError response."""
        details = error.response.get("Error", {})
        return cls(
            operation=operation,
            code=details.get("Code"),
            message=details.get("Message", str(error)),
        )

    @property
    def is_not_found(self) -> bool:
        """True when the service reported a missing resource."""
        return self.code == "ResourceNotFoundException"


# ---------------------------------------------------------------------------
# Local Exceptions
# ---------------------------------------------------------------------------


class LocalLogicError(DynShellError):
    """
    Raised when local pagination state is inconsistent.

    For example, resuming a page that has no continuation. This points at a
    bug in the shell rather than at the remote service.
    """

    pass

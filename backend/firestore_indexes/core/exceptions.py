"""Exceptions raised while preparing and deploying index specifications."""

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from firestore_indexes.indexes.actions import ReconcileResult


class IndexDeployException(Exception):
    """Base class for all firestore_indexes errors."""

    pass


class ParseError(IndexDeployException):
    """Raised when a resource name does not match its expected pattern.

    Parsing never falls back to partial data; the operation that needed the
    identifiers cannot continue.
    """

    def __init__(self, message: str, name: Optional[str] = None):
        """Create a new ParseError.

        Args:
            message: Human readable description
            name: The resource name that failed to parse, if any
        """
        self.name = name
        super().__init__(message)


class ValidationError(IndexDeployException):
    """Raised when a specification entry has an invalid shape.

    Validation runs before any remote call, so this error always aborts the
    whole deploy.
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        entry: Any = None,
        errors: Optional[List["ValidationError"]] = None,
    ):
        """Create a new ValidationError.

        Args:
            message: Human readable description
            key: The offending key, if the error concerns a single key
            entry: The specification entry being validated
            errors: Every per-entry error when several entries are invalid
        """
        self.key = key
        self.entry = entry
        self.errors = errors if errors is not None else [self]
        super().__init__(message)


class RemoteCallError(IndexDeployException):
    """Raised when a call to the Firestore Admin API fails.

    Examples:
    - Permission denied on the project
    - Quota exhausted after retries
    - Network failure talking to the API
    """

    def __init__(
        self,
        operation: str,
        target: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        """Create a new RemoteCallError.

        Args:
            operation: Logical operation, e.g. "create_index" or "patch_field"
            target: Resource path the call was made against
            message: Description of the underlying failure
            status_code: HTTP status code when the API responded
        """
        self.operation = operation
        self.target = target
        self.status_code = status_code
        detail = f"{operation} failed for {target}"
        if status_code is not None:
            detail += f" (HTTP {status_code})"
        super().__init__(f"{detail}: {message}")


class ReconciliationError(IndexDeployException):
    """Raised after a deploy in which one or more remote calls failed.

    Every issued call has finished by the time this is raised; ``failures``
    holds each of them and ``result`` describes what did succeed.
    """

    def __init__(self, failures: List[RemoteCallError], result: "ReconcileResult"):
        """Create a new ReconciliationError.

        Args:
            failures: Every RemoteCallError raised during the pass
            result: Counts of the operations that did complete
        """
        self.failures = failures
        self.result = result
        messages = "; ".join(str(failure) for failure in failures)
        super().__init__(f"{len(failures)} index operation(s) failed: {messages}")

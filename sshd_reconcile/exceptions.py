"""Reconciliation error hierarchy."""

from typing import Optional, Sequence


class ReconcileError(Exception):
    """Base exception for reconciliation failures."""

    kind = "reconcile_error"

    def __init__(self, message: str, entity: Optional[str] = None):
        """
        Initialize error.

        Args:
            message: Human readable description
            entity: Declarative entity that failed (key path, fragment file, daemon label)
        """
        super().__init__(message)
        self.message = message
        self.entity = entity


class ConfigError(ReconcileError):
    """Configuration file missing, unreadable or invalid."""

    kind = "config_error"


class HostKeyValidationError(ReconcileError, ValueError):
    """Malformed host key declaration reached the engine."""

    kind = "validation_error"


class FilesystemError(ReconcileError):
    """Directory or file creation/removal failed."""

    kind = "filesystem_error"

    def __init__(self, message: str, path: str):
        super().__init__(message, entity=path)
        self.path = path


class ExternalToolError(ReconcileError):
    """External executable could not be started or exited non-zero."""

    kind = "external_tool_error"

    def __init__(
        self,
        message: str,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        entity: Optional[str] = None,
    ):
        super().__init__(message, entity=entity)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class StateQueryError(ReconcileError):
    """Remote login state could not be determined."""

    kind = "state_query_error"

"""External process invocation."""

import logging
import shlex
import subprocess
from typing import Optional, Sequence

from sshd_reconcile.exceptions import ExternalToolError

logger = logging.getLogger("sshd_reconcile")


def format_command(args: Sequence[str]) -> str:
    """
    Render an argument vector as a shell-escaped string for display.

    Only used for logs and reports; commands are always executed from the
    argument vector itself.

    Args:
        args: Command and arguments

    Returns:
        Shell-escaped command string
    """
    return shlex.join(str(arg) for arg in args)


class CommandRunner:
    """Runs external executables synchronously from an argument vector."""

    def __init__(self, dry_run: bool = False, timeout: Optional[float] = None):
        """
        Initialize command runner.

        Args:
            dry_run: Log mutating commands instead of running them
            timeout: Seconds before a command is killed, None waits indefinitely
        """
        self.dry_run = dry_run
        self.timeout = timeout

    def run(
        self, args: Sequence[str], mutating: bool = True, entity: Optional[str] = None
    ) -> subprocess.CompletedProcess:
        """
        Execute command and fail on a non-zero exit status.

        Args:
            args: Command and arguments
            mutating: False for read-only queries, which still run in dry-run mode
            entity: Declarative entity the command acts on, for error reporting

        Returns:
            Completed process with captured text output

        Raises:
            ExternalToolError: If the command cannot be started or exits non-zero
        """
        args = [str(arg) for arg in args]
        command = format_command(args)

        if self.dry_run and mutating:
            logger.info(f"Would execute: {command}")
            return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

        logger.info(f"Executing: {command}")

        try:
            result = self._execute(args)
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                f"Command timed out after {self.timeout} seconds: {command}", args, entity=entity
            ) from e
        except OSError as e:
            raise ExternalToolError(
                f"Cannot start {args[0]}: {e.strerror or e}", args, entity=entity
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.error(f"Command failed ({result.returncode}): {stderr}")
            raise ExternalToolError(
                f"{command} exited with status {result.returncode}: {stderr}",
                args,
                returncode=result.returncode,
                stderr=stderr,
                entity=entity,
            )

        return result

    def _execute(self, args: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            args, shell=False, stdin=subprocess.DEVNULL, capture_output=True, text=True, timeout=self.timeout
        )

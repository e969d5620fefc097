"""Host key materialization service."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from sshd_reconcile.exceptions import ExternalToolError, FilesystemError, ReconcileError
from sshd_reconcile.models.host_key import HostKeySpec
from sshd_reconcile.models.report import MaterializeResult, StepFailure
from sshd_reconcile.services.keygen_service import KeygenService
from sshd_reconcile.utils.file_utils import FileUtils

logger = logging.getLogger("sshd_reconcile")

# rwx for owner, traverse-only for everyone else; the key file protects itself
KEY_DIRECTORY_MODE = 0o711


class HostKeyMaterializer:
    """Ensures every declared host key exists on disk, generating missing ones once."""

    step_name = "host_keys"

    def __init__(self, keygen_service: KeygenService):
        """
        Initialize materializer.

        Args:
            keygen_service: ssh-keygen service used for missing keys
        """
        self.keygen_service = keygen_service

    def materialize(self, host_keys: Iterable[HostKeySpec]) -> MaterializeResult:
        """
        Generate every declared key that is missing.

        Entries are independent: a failure is recorded and the next entry is
        still processed. Same-path entries in concurrent runs are not locked.

        Args:
            host_keys: Declared host keys

        Returns:
            Generated, already present and failed entries
        """
        result = MaterializeResult()

        for spec in host_keys:
            try:
                command = self.ensure_key(spec)
            except ReconcileError as e:
                logger.error(f"Failed to materialize host key {spec.path}: {e.message}")
                if e.entity is None:
                    e.entity = spec.path
                result.failures.append(StepFailure.from_error(self.step_name, e))
                continue

            if command is None:
                result.present.append(spec.path)
            else:
                result.generated.append(spec.path)
                result.commands.append(command)

        return result

    def ensure_key(self, spec: HostKeySpec) -> Optional[str]:
        """
        Generate a single host key unless it is already present.

        Args:
            spec: Host key declaration

        Returns:
            Executed ssh-keygen command, or None if the key was present

        Raises:
            HostKeyValidationError: If the declaration is malformed
            FilesystemError: If stale files or the parent directory cannot be handled
            ExternalToolError: If ssh-keygen fails
        """
        path = Path(spec.path)

        # A zero-size file (e.g. from an interrupted run) counts as absent
        if FileUtils.has_content(path):
            logger.debug(f"Host key present, skipping: {path}")
            return None

        # Build first so a malformed declaration leaves the filesystem untouched
        self.keygen_service.build_command(spec)

        if self.keygen_service.runner.dry_run:
            return self.keygen_service.generate(spec)

        if FileUtils.is_symlink(path):
            logger.info(f"Host key path is a symlink, leaving it in place: {path}")
        else:
            FileUtils.remove_file(path)

        if FileUtils.ensure_directory(path.parent, mode=KEY_DIRECTORY_MODE):
            logger.info(f"Created host key directory: {path.parent}")

        try:
            command = self.keygen_service.generate(spec)
        except ExternalToolError:
            # Leave the entry absent so the next run retries it
            try:
                if not FileUtils.is_symlink(path):
                    FileUtils.remove_file(path)
            except FilesystemError as cleanup_error:
                logger.warning(f"Could not remove partial host key {path}: {cleanup_error.message}")
            raise

        logger.info(f"Generated {spec.type.value} host key: {path}")
        return command

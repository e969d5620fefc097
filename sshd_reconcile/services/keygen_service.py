"""ssh-keygen command generation and execution service."""

import logging
import shutil
from typing import Optional

from sshd_reconcile.exceptions import HostKeyValidationError
from sshd_reconcile.models.host_key import HostKeySpec, HostKeyType
from sshd_reconcile.utils.process import CommandRunner, format_command
from sshd_reconcile.utils.validators import validate_key_bits, validate_key_path

logger = logging.getLogger("sshd_reconcile")


class KeygenService:
    """Service for ssh-keygen command building and execution."""

    def __init__(self, runner: CommandRunner, ssh_keygen_path: Optional[str] = None):
        """
        Initialize ssh-keygen service.

        Args:
            runner: Process invocation primitive
            ssh_keygen_path: Path to ssh-keygen binary. If None, uses 'ssh-keygen' from PATH.
        """
        self.runner = runner
        if ssh_keygen_path is None:
            if shutil.which("ssh-keygen") is None:
                logger.warning("ssh-keygen not found in PATH, key generation will fail")
            self.ssh_keygen_path = "ssh-keygen"
        else:
            self.ssh_keygen_path = ssh_keygen_path

        logger.debug(f"Using ssh-keygen command: {self.ssh_keygen_path}")

    def build_command(self, spec: HostKeySpec) -> list[str]:
        """
        Build the ssh-keygen argument vector for one host key.

        Args:
            spec: Host key declaration

        Returns:
            Argument vector, executable first

        Raises:
            HostKeyValidationError: If the declaration would produce a malformed command
        """
        try:
            key_type = HostKeyType(spec.type).value
            path = validate_key_path(spec.path)
            bits = validate_key_bits(spec.bits)
        except (TypeError, ValueError) as e:
            raise HostKeyValidationError(f"Refusing to build ssh-keygen command: {e}", entity=spec.path) from e

        args = [self.ssh_keygen_path, "-t", key_type]
        if bits is not None:
            args += ["-b", str(bits)]
        # -C is always passed so ssh-keygen does not default to user@hostname
        args += ["-C", spec.comment]
        if spec.open_ssh_format:
            args.append("-o")
        args += ["-f", path, "-N", ""]
        return args

    def generate(self, spec: HostKeySpec) -> str:
        """
        Generate a host key pair at the declared path.

        Args:
            spec: Host key declaration

        Returns:
            Shell-escaped form of the executed command

        Raises:
            HostKeyValidationError: If the declaration is malformed
            ExternalToolError: If ssh-keygen fails
        """
        args = self.build_command(spec)
        self.runner.run(args, entity=spec.path)
        return format_command(args)

"""sshd_config.d fragment rendering service."""

import logging
import os
from pathlib import Path
from typing import Iterable

from sshd_reconcile.models.host_key import HostKeySpec
from sshd_reconcile.models.report import RenderedFragments
from sshd_reconcile.utils.file_utils import FileUtils

logger = logging.getLogger("sshd_reconcile")

# sshd loads sshd_config.d in lexical order. HostKey lines accumulate across
# files, but single-value directives keep the first value read, so the extra
# text sorts after the host keys and cannot be shadowed by this file.
HOST_KEYS_FRAGMENT = "099-host-keys.conf"
EXTRA_FRAGMENT = "100-sshd-reconcile.conf"


class FragmentService:
    """Service rendering and writing the two engine-owned config fragments."""

    def __init__(self, config_dir: Path, dry_run: bool = False):
        """
        Initialize fragment service.

        Args:
            config_dir: The daemon's sshd_config.d directory
            dry_run: Log writes instead of performing them
        """
        self.config_dir = config_dir
        self.dry_run = dry_run

    @property
    def host_keys_path(self) -> Path:
        return self.config_dir / HOST_KEYS_FRAGMENT

    @property
    def extra_path(self) -> Path:
        return self.config_dir / EXTRA_FRAGMENT

    @staticmethod
    def render(host_keys: Iterable[HostKeySpec], extra: str) -> RenderedFragments:
        """
        Render fragment contents.

        Args:
            host_keys: Declared host keys, in directive order
            extra: Free-form sshd_config text

        Returns:
            Rendered fragments; host_keys_fragment is None for an empty list
        """
        lines = [f"HostKey {spec.path}" for spec in host_keys]
        return RenderedFragments(
            host_keys_fragment="\n".join(lines) if lines else None,
            extra_fragment=extra,
        )

    def write(self, fragments: RenderedFragments) -> tuple[list[str], list[str]]:
        """
        Write rendered fragments, fully replacing previous content.

        Args:
            fragments: Rendered fragment contents

        Returns:
            Tuple of (written paths, removed paths)

        Raises:
            FilesystemError: If a fragment cannot be written or removed
        """
        written = []
        removed = []

        if fragments.host_keys_fragment is not None:
            self._write(self.host_keys_path, fragments.host_keys_fragment)
            written.append(str(self.host_keys_path))
        elif os.path.lexists(self.host_keys_path):
            # No declared keys: drop our old directives so sshd falls back to its defaults
            if self.dry_run:
                logger.info(f"Would remove: {self.host_keys_path}")
            else:
                FileUtils.remove_file(self.host_keys_path)
                logger.info(f"Removed host key fragment: {self.host_keys_path}")
            removed.append(str(self.host_keys_path))

        # Always written, even empty, so clearing extra_config clears the file
        self._write(self.extra_path, fragments.extra_fragment)
        written.append(str(self.extra_path))

        return written, removed

    def _write(self, path: Path, content: str) -> None:
        if self.dry_run:
            logger.info(f"Would write: {path} ({len(content)} bytes)")
            return
        FileUtils.write_file(path, content)
        logger.info(f"Wrote config fragment: {path}")

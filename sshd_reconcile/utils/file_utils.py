"""File system utilities."""

import errno
import logging
import os
import stat
from pathlib import Path
from typing import Optional

from sshd_reconcile.exceptions import FilesystemError

logger = logging.getLogger("sshd_reconcile")

# stat() errors meaning nothing usable exists at the path
_MISSING_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.ELOOP}


class FileUtils:
    """Utility class for file operations."""

    @staticmethod
    def ensure_directory(path: Path, mode: Optional[int] = None) -> bool:
        """
        Ensure directory exists, create if not.

        The mode is applied only to a directory created here; an existing
        directory keeps its permissions.

        Args:
            path: Directory path to ensure
            mode: Permission bits for a newly created directory

        Returns:
            True if the directory was created

        Raises:
            FilesystemError: If the directory cannot be created
        """
        try:
            if path.is_dir():
                return False
            path.mkdir(parents=True, exist_ok=True)
            if mode is not None:
                # mkdir's mode is filtered by the umask
                os.chmod(path, mode)
        except OSError as e:
            raise FilesystemError(f"Cannot create directory {path}: {e.strerror or e}", path=str(path)) from e

        logger.debug(f"Created directory: {path}")
        return True

    @staticmethod
    def has_content(path: Path) -> bool:
        """
        Check that path is a regular file (following symlinks) and is not empty.

        Args:
            path: File path to check

        Returns:
            True if the file exists with non-zero size

        Raises:
            FilesystemError: If the path cannot be inspected (too long, no permission)
        """
        try:
            st = path.stat()
        except OSError as e:
            if e.errno in _MISSING_ERRNOS:
                return False
            raise FilesystemError(f"Cannot inspect {path}: {e.strerror or e}", path=str(path)) from e
        return stat.S_ISREG(st.st_mode) and st.st_size > 0

    @staticmethod
    def is_symlink(path: Path) -> bool:
        """
        Check whether path itself is a symbolic link, dangling or not.

        Raises:
            FilesystemError: If the path cannot be inspected
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            if e.errno in (errno.ENOENT, errno.ENOTDIR):
                return False
            raise FilesystemError(f"Cannot inspect {path}: {e.strerror or e}", path=str(path)) from e
        return stat.S_ISLNK(st.st_mode)

    @staticmethod
    def remove_file(path: Path) -> bool:
        """
        Remove a file if it exists, without following symlinks.

        Args:
            path: File path to remove

        Returns:
            True if something was removed

        Raises:
            FilesystemError: If removal fails (e.g. the path is a directory)
        """
        try:
            path.unlink()
        except OSError as e:
            if e.errno in (errno.ENOENT, errno.ENOTDIR):
                return False
            raise FilesystemError(f"Cannot remove {path}: {e.strerror or e}", path=str(path)) from e

        logger.debug(f"Removed file: {path}")
        return True

    @staticmethod
    def write_file(path: Path, content: str) -> None:
        """
        Write string content to file, replacing any previous content.

        Args:
            path: File path to write
            content: Content to write

        Raises:
            FilesystemError: If the file cannot be written
        """
        FileUtils.ensure_directory(path.parent)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise FilesystemError(f"Cannot write {path}: {e.strerror or e}", path=str(path)) from e
        logger.debug(f"Wrote file: {path}")

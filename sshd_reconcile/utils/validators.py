"""Input validation utilities."""

import posixpath
from typing import Optional


def validate_key_path(path: str) -> str:
    """
    Validate host key path.

    Args:
        path: Private key file path

    Returns:
        The path, unchanged

    Raises:
        ValueError: If path is empty or not absolute
    """
    if not path or len(path.strip()) == 0:
        raise ValueError("Host key path cannot be empty")

    if "\x00" in path:
        raise ValueError(f"Host key path contains a NUL byte: {path!r}")

    if not posixpath.isabs(path):
        raise ValueError(f"Host key path must be absolute: {path}")

    if path.endswith("/"):
        raise ValueError(f"Host key path must name a file, not a directory: {path}")

    return path


def validate_key_bits(bits: Optional[int]) -> Optional[int]:
    """
    Validate key size.

    Args:
        bits: Key size in bits, or None for the ssh-keygen default

    Returns:
        The bits value, unchanged

    Raises:
        ValueError: If bits is set and not a positive integer
    """
    if bits is None:
        return None

    # bool is an int subclass; True would silently become "-b 1"
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise ValueError(f"Key size must be an integer: {bits!r}")

    if bits <= 0:
        raise ValueError(f"Key size must be positive: {bits}")

    return bits

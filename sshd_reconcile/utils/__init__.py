"""Utility modules."""

from .file_utils import FileUtils
from .process import CommandRunner, format_command
from .validators import validate_key_bits, validate_key_path

__all__ = ["FileUtils", "CommandRunner", "format_command", "validate_key_path", "validate_key_bits"]

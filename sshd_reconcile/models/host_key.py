"""Host key data models."""

from enum import Enum
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sshd_reconcile.exceptions import HostKeyValidationError
from sshd_reconcile.utils.validators import validate_key_bits, validate_key_path


class HostKeyType(str, Enum):
    """Key types accepted by `ssh-keygen -t`."""

    DSA = "dsa"
    ECDSA = "ecdsa"
    ED25519 = "ed25519"
    RSA = "rsa"


class HostKeySpec(BaseModel):
    """One declared SSH host key."""

    type: HostKeyType
    path: str
    bits: Optional[int] = None  # None lets ssh-keygen pick (RSA=3072, ECDSA=256, Ed25519=fixed)
    comment: str = ""  # never derived from the hostname
    open_ssh_format: bool = Field(default=False, alias="openSSHFormat")

    @field_validator("path")
    @classmethod
    def check_path(cls, v):
        """Require a non-empty absolute path."""
        return validate_key_path(v)

    @field_validator("bits", mode="before")
    @classmethod
    def check_bits(cls, v):
        """Require a positive integer when set."""
        return validate_key_bits(v)

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "type": "rsa",
                "path": "/etc/ssh/custom_host_rsa_key",
                "bits": 4096,
                "comment": "",
                "openSSHFormat": False,
            }
        },
    )


# Keys macOS generates on its own
DEFAULT_HOST_KEYS = [
    HostKeySpec(type=HostKeyType.RSA, path="/etc/ssh/ssh_host_rsa_key"),
    HostKeySpec(type=HostKeyType.ECDSA, path="/etc/ssh/ssh_host_ecdsa_key"),
    HostKeySpec(type=HostKeyType.ED25519, path="/etc/ssh/ssh_host_ed25519_key"),
]


def build_host_key_spec(data: Union[HostKeySpec, dict[str, Any]], index: Optional[int] = None) -> HostKeySpec:
    """
    Construct and validate a single host key declaration.

    Args:
        data: Raw option mapping (or an already built spec)
        index: Position in the declared list, used in error messages

    Returns:
        Validated host key spec

    Raises:
        HostKeyValidationError: If the declaration is malformed
    """
    if isinstance(data, HostKeySpec):
        return data

    where = f"host_keys[{index}]" if index is not None else "host key"

    if not isinstance(data, dict):
        raise HostKeyValidationError(f"{where}: expected a mapping, got {type(data).__name__}", entity=where)

    try:
        return HostKeySpec.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'value'}: {err['msg']}" for err in e.errors()
        )
        entity = data.get("path") or where
        raise HostKeyValidationError(f"{where}: {problems}", entity=str(entity)) from e


def parse_host_keys(items: Optional[Iterable[Any]]) -> list[HostKeySpec]:
    """
    Construct and validate an ordered list of host key declarations.

    Order is preserved; it is also the HostKey directive order.
    Duplicate paths are accepted; see duplicate_paths.

    Args:
        items: Raw list from the option layer

    Returns:
        List of validated host key specs

    Raises:
        HostKeyValidationError: If the list or any entry is malformed
    """
    if items is None:
        return []

    if isinstance(items, (str, bytes, dict)):
        raise HostKeyValidationError(f"host_keys must be a list, got {type(items).__name__}")

    return [build_host_key_spec(item, index) for index, item in enumerate(items)]


def duplicate_paths(specs: Iterable[HostKeySpec]) -> list[str]:
    """Return paths declared more than once, each listed once in first-repeat order."""
    seen = set()
    duplicates = []
    for spec in specs:
        if spec.path in seen and spec.path not in duplicates:
            duplicates.append(spec.path)
        seen.add(spec.path)
    return duplicates

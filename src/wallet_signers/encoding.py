from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from eth_utils import is_hex
from hexbytes import HexBytes

from .exceptions import SigningError

UINT64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1

LEGACY_V_OFFSET = 27
EIP155_V_OFFSET = 35


def to_camel(s: str) -> str:
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


def ensure_0x(s: str) -> str:
    s = s.strip()
    if s.startswith("0x") or s.startswith("0X"):
        return "0x" + s[2:]
    return "0x" + s


def parse_bytes(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray, HexBytes)):
        return bytes(value)
    if isinstance(value, str):
        s = ensure_0x(value)
        if not is_hex(s):
            raise SigningError(f"invalid hex bytes: {value}")
        body = s[2:]
        if len(body) % 2:
            body = "0" + body
        try:
            return bytes.fromhex(body)
        except ValueError as e:
            raise SigningError(f"invalid hex bytes: {value}") from e
    raise SigningError(f"unsupported bytes type: {type(value)}")


def parse_bytes32(value: Any) -> bytes:
    b = parse_bytes(value)
    if len(b) != 32:
        raise SigningError(f"expected 32 bytes, got {len(b)}")
    return b


def bytes_to_hex(b: bytes) -> str:
    return "0x" + b.hex()


def parse_uint(value: Any, max_value: int = UINT256_MAX) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise SigningError("uint cannot be bool")
    if isinstance(value, int):
        i = value
    elif isinstance(value, Decimal):
        i = int(value)
        if Decimal(i) != value:
            raise SigningError("uint must be an integer")
    elif isinstance(value, str):
        s = value.strip()
        try:
            i = int(s, 16) if s.startswith(("0x", "0X")) else int(s, 10)
        except ValueError as e:
            raise SigningError(f"invalid uint: {value!r}") from e
    else:
        raise SigningError(f"unsupported uint type: {type(value)}")
    if i < 0:
        raise SigningError("uint cannot be negative")
    if i > max_value:
        raise SigningError(f"uint out of range: {i}")
    return i


def parse_uint64(value: Any) -> int:
    return parse_uint(value, UINT64_MAX)


def parse_uint256(value: Any) -> int:
    return parse_uint(value, UINT256_MAX)


@dataclass(frozen=True)
class Digest:
    """
    A pre-computed 32-byte hash handed to a digest signer as-is.

    Signers receive a ``Digest`` rather than raw bytes so that they never
    hash the payload a second time.
    """

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != 32:
            raise SigningError(f"digest must be 32 bytes, got {len(self.value)}")

    @classmethod
    def from_hash(cls, value: Any) -> Digest:
        return cls(parse_bytes32(value))

    def __bytes__(self) -> bytes:
        return self.value

    def hex(self) -> str:
        return bytes_to_hex(self.value)


def _check_recovery_id(recovery_id: int) -> int:
    if isinstance(recovery_id, bool) or recovery_id not in (0, 1):
        raise SigningError(f"recovery id must be 0 or 1, got {recovery_id!r}")
    return int(recovery_id)


def to_legacy_v(recovery_id: int) -> int:
    return _check_recovery_id(recovery_id) + LEGACY_V_OFFSET


def to_eip155_v(recovery_id: int, chain_id: int) -> int:
    """Applies EIP-155 replay protection to a recovery id."""
    rid = _check_recovery_id(recovery_id)
    cid = parse_uint64(chain_id)
    v = rid + EIP155_V_OFFSET + cid * 2
    if v > UINT64_MAX:
        raise SigningError(f"chain id too large for EIP-155 v: {cid}")
    return v


def from_eip155_v(v: int) -> tuple[int, int]:
    """Splits an EIP-155 ``v`` into ``(recovery_id, chain_id)``."""
    if v < EIP155_V_OFFSET:
        raise SigningError(f"not an EIP-155 v value: {v}")
    chain_id, recovery_id = divmod(v - EIP155_V_OFFSET, 2)
    return recovery_id, chain_id


def to_standard_v(v: int) -> int:
    if v in (0, 1):
        return v
    if v in (27, 28):
        return v - LEGACY_V_OFFSET
    return from_eip155_v(v)[0]

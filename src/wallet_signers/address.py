from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any

import base58
from eth_utils import keccak, to_checksum_address

from .encoding import parse_bytes
from .exceptions import SigningError

TRON_ADDRESS_PREFIX = 0x41


@dataclass(frozen=True)
class Address:
    """A 20-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != 20:
            raise SigningError(f"address must be 20 bytes, got {len(self.raw)}")

    @classmethod
    def from_hex(cls, addr: str) -> Address:
        try:
            raw = parse_bytes(addr)
        except SigningError as e:
            raise SigningError(f"invalid address: {addr}") from e
        return cls(raw)

    @classmethod
    def from_public_key(cls, public_key: Any) -> Address:
        pub = parse_bytes(public_key)
        # uncompressed SEC1 keys carry a leading 0x04
        if len(pub) == 65 and pub[0] == 4:
            pub = pub[1:]
        if len(pub) != 64:
            raise SigningError(f"public key must be 64 bytes, got {len(pub)}")
        return cls(keccak(pub)[-20:])

    @classmethod
    def coerce(cls, value: Any) -> Address:
        if isinstance(value, Address):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        return cls(parse_bytes(value))

    @property
    def checksum(self) -> str:
        return to_checksum_address(self.raw)

    @property
    def hex(self) -> str:
        return "0x" + self.raw.hex()

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.checksum

    def __repr__(self) -> str:
        return f"Address({self.checksum})"


def _check_prefix(prefix: int) -> int:
    if not 0 <= prefix <= 0xFF:
        raise SigningError(f"address prefix must fit in one byte, got {prefix}")
    return prefix


def _sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def tron_address_bytes(address: Address, prefix: int = TRON_ADDRESS_PREFIX) -> bytes:
    return bytes([_check_prefix(prefix)]) + address.raw


def to_tron_hex_address(address: Address, prefix: int = TRON_ADDRESS_PREFIX) -> str:
    return tron_address_bytes(address, prefix).hex()


def to_tron_b58_address(address: Address, prefix: int = TRON_ADDRESS_PREFIX) -> str:
    """
    Renders ``address`` in the Tron display form:
    base58(prefix || address || sha256(sha256(prefix || address))[:4]).
    """
    payload = tron_address_bytes(address, prefix)
    return base58.b58encode(payload + _sha256d(payload)[:4]).decode("ascii")


def from_tron_b58_address(text: str, prefix: int = TRON_ADDRESS_PREFIX) -> Address:
    try:
        decoded = base58.b58decode(text.strip())
    except ValueError as e:
        raise SigningError(f"invalid base58 address: {text}") from e
    if len(decoded) != 25:
        raise SigningError(f"expected 25 decoded bytes, got {len(decoded)}")
    payload, checksum = decoded[:21], decoded[21:]
    if _sha256d(payload)[:4] != checksum:
        raise SigningError(f"bad address checksum: {text}")
    if payload[0] != _check_prefix(prefix):
        raise SigningError(f"unexpected address prefix 0x{payload[0]:02x}")
    return Address(payload[1:])

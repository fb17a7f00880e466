from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Annotated, Any, Optional

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError
from pydantic.functional_validators import AfterValidator, BeforeValidator

from .address import TRON_ADDRESS_PREFIX, Address
from .encoding import (
    Digest,
    bytes_to_hex,
    parse_bytes,
    parse_uint64,
    parse_uint256,
    to_camel,
    to_standard_v,
)
from .exceptions import ConfigurationError, SigningError


def _validate_recovery_id(v: int) -> int:
    if v not in (0, 1):
        raise ValueError("recovery_id must be 0 or 1")
    return v


def _validate_prefix(v: int) -> int:
    if not 0 <= v <= 0xFF:
        raise ValueError("address prefix must fit in one byte")
    return v


Uint64 = Annotated[int, BeforeValidator(parse_uint64)]
Uint256 = Annotated[int, BeforeValidator(parse_uint256)]
RecoveryId = Annotated[int, AfterValidator(_validate_recovery_id)]
AddressPrefix = Annotated[int, BeforeValidator(parse_uint64), AfterValidator(_validate_prefix)]


class SDKModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class RawSignature(SDKModel):
    """What a digest signer returns: the curve scalars and the recovery id."""

    model_config = ConfigDict(frozen=True)

    r: Uint256
    s: Uint256
    recovery_id: RecoveryId


class Signature(SDKModel):
    """
    An ``(r, s, v)`` signature.

    ``v`` is either 27/28 or an EIP-155 value binding the signature to a chain.
    """

    model_config = ConfigDict(frozen=True)

    r: Uint256
    s: Uint256
    v: Uint64

    @property
    def recovery_id(self) -> int:
        return to_standard_v(self.v)

    def to_bytes(self) -> bytes:
        v_len = max(1, (self.v.bit_length() + 7) // 8)
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + self.v.to_bytes(v_len, "big")

    def to_hex(self) -> str:
        return bytes_to_hex(self.to_bytes())

    @classmethod
    def from_bytes(cls, value: bytes | str) -> Signature:
        sig = parse_bytes(value)
        if len(sig) < 65:
            raise SigningError(f"signature must be at least 65 bytes, got {len(sig)}")
        return cls(
            r=int.from_bytes(sig[:32], "big"),
            s=int.from_bytes(sig[32:64], "big"),
            v=int.from_bytes(sig[64:], "big"),
        )

    def recover(self, digest: bytes | Digest) -> Address:
        """Returns the address that produced this signature over ``digest``."""
        digest = bytes(digest)
        if len(digest) != 32:
            raise SigningError("digest must be 32 bytes")
        try:
            sig = keys.Signature(vrs=(self.recovery_id, self.r, self.s))
            public_key = sig.recover_public_key_from_msg_hash(digest)
        except (BadSignature, KeyValidationError, ValueError) as e:
            raise SigningError(f"cannot recover signer: {e}") from e
        return Address(public_key.to_canonical_address())

    def __str__(self) -> str:
        return self.to_hex()


class WalletConfig(SDKModel):
    chain_id: Uint64 = 0
    tron_address_prefix: AddressPrefix = TRON_ADDRESS_PREFIX
    private_key: Optional[SecretStr] = Field(default=None, repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> WalletConfig:
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"invalid wallet config: {e}") from e

    @classmethod
    def from_env(
        cls,
        prefix: str = "WALLET_",
        environ: Mapping[str, str] | None = None,
    ) -> WalletConfig:
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for field in ("chain_id", "tron_address_prefix", "private_key"):
            value = env.get(prefix + field.upper())
            if value:
                data[field] = value.strip()
        return cls.from_mapping(data)

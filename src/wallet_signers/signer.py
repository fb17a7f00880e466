from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, Union, runtime_checkable

from eth_keys import keys

from .address import TRON_ADDRESS_PREFIX, Address, to_tron_b58_address, to_tron_hex_address
from .encoding import Digest, LEGACY_V_OFFSET, parse_bytes, parse_uint64, to_eip155_v, to_legacy_v
from .exceptions import ConfigurationError, SigningError
from .models import RawSignature, Signature, WalletConfig
from .signing import Transaction, TypedDataLike, hash_message, typed_data_hash

logger = logging.getLogger(__name__)

SignerT = TypeVar("SignerT", bound="Signer")

RawSignatureLike = Union[RawSignature, tuple[int, int, int]]


@runtime_checkable
class DigestSigner(Protocol):
    def sign_digest(self, digest: Digest) -> RawSignatureLike:
        """
        Sign a pre-hashed 32-byte digest without hashing it again.
        Returns ``RawSignature`` or an ``(r, s, recovery_id)`` tuple.
        """


@runtime_checkable
class Signer(Protocol):
    """
    Backend-agnostic signing contract.

    The signing methods are coroutines so that hardware or remote backends may
    suspend on I/O; local backends return without awaiting anything.
    """

    @property
    def address(self) -> Address:
        ...

    @property
    def chain_id(self) -> int:
        ...

    def with_chain_id(self: SignerT, chain_id: int) -> SignerT:
        """Returns a signer that uses ``chain_id`` for EIP-155."""

    async def sign_message(self, message: bytes | str) -> Signature:
        """Signs the EIP-191 hash of ``message``."""

    async def sign_transaction(self, tx: Transaction | Mapping[str, Any]) -> Signature:
        """Signs the transaction's signing hash, EIP-155 encoding ``v``."""

    async def sign_typed_data(self, payload: TypedDataLike) -> Signature:
        """Signs the EIP-712 digest of ``payload``."""


class PrivateKeyDigestSigner:
    """Digest signer backed by a local secp256k1 private key."""

    def __init__(self, private_key: str | bytes | keys.PrivateKey):
        if isinstance(private_key, keys.PrivateKey):
            self._key = private_key
            return
        try:
            self._key = keys.PrivateKey(parse_bytes(private_key))
        except Exception as e:  # noqa: BLE001
            raise SigningError("invalid private key") from e

    @property
    def address(self) -> Address:
        return Address(self._key.public_key.to_canonical_address())

    @property
    def public_key(self) -> bytes:
        return self._key.public_key.to_bytes()

    def sign_digest(self, digest: Digest) -> RawSignature:
        sig = self._key.sign_msg_hash(bytes(digest))
        return RawSignature(r=sig.r, s=sig.s, recovery_id=sig.v)

    def __repr__(self) -> str:
        return f"PrivateKeyDigestSigner(address={self.address})"


def _to_raw_signature(value: RawSignatureLike) -> RawSignature:
    if isinstance(value, RawSignature):
        return value
    r, s, recovery_id = value
    return RawSignature(r=r, s=s, recovery_id=recovery_id)


class Wallet:
    """
    Binds a digest signer to an address and a chain id.

    The address is fixed at construction. ``with_chain_id`` returns a copy that
    shares the same digest signer.
    """

    def __init__(
        self,
        signer: DigestSigner,
        address: Address | str | bytes | None = None,
        chain_id: int = 0,
        *,
        tron_address_prefix: int = TRON_ADDRESS_PREFIX,
    ) -> None:
        if address is None:
            address = getattr(signer, "address", None)
            if address is None:
                raise ConfigurationError("address is required when the signer does not expose one")
        try:
            self._chain_id = parse_uint64(chain_id)
        except SigningError as e:
            raise ConfigurationError(f"invalid chain_id: {chain_id!r}") from e
        if not 0 <= tron_address_prefix <= 0xFF:
            raise ConfigurationError(f"invalid tron_address_prefix: {tron_address_prefix!r}")
        self._signer = signer
        self._address = Address.coerce(address)
        self._tron_address_prefix = tron_address_prefix

    @classmethod
    def new_with_signer(cls, signer: DigestSigner, address: Address | str | bytes, chain_id: int) -> Wallet:
        return cls(signer, address, chain_id)

    @property
    def signer(self) -> DigestSigner:
        return self._signer

    @property
    def address(self) -> Address:
        return self._address

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def tron_address_prefix(self) -> int:
        return self._tron_address_prefix

    def with_chain_id(self, chain_id: int) -> Wallet:
        try:
            cid = parse_uint64(chain_id)
        except SigningError as e:
            raise ConfigurationError(f"invalid chain_id: {chain_id!r}") from e
        wallet = copy.copy(self)
        wallet._chain_id = cid
        return wallet

    def sign_hash(self, digest: Digest | bytes) -> Signature:
        """Signs a 32-byte digest as-is; ``v`` is ``recovery_id + 27``."""
        d = digest if isinstance(digest, Digest) else Digest.from_hash(digest)
        raw = _to_raw_signature(self._signer.sign_digest(d))
        logger.debug("signed digest %s with %s", d.hex(), self._address)
        return Signature(r=raw.r, s=raw.s, v=to_legacy_v(raw.recovery_id))

    def sign_message_sync(self, message: bytes | str) -> Signature:
        return self.sign_hash(hash_message(message))

    def sign_transaction_sync(self, tx: Transaction | Mapping[str, Any]) -> Signature:
        """
        Signs ``tx`` using its own chain id, or the wallet's when it has none.
        The same chain id goes into the signing hash and into ``v``.
        """
        tx = Transaction.coerce(tx)
        chain_id = tx.chain_id
        if chain_id is None:
            chain_id = self._chain_id
        tx = tx.with_chain_id(chain_id)

        sig = self.sign_hash(tx.sighash())
        if not tx.is_replay_protected:
            return sig
        logger.debug("applying EIP-155 for chain %d", chain_id)
        return Signature(r=sig.r, s=sig.s, v=to_eip155_v(sig.v - LEGACY_V_OFFSET, chain_id))

    def sign_typed_data_sync(self, payload: TypedDataLike) -> Signature:
        return self.sign_hash(typed_data_hash(payload))

    async def sign_message(self, message: bytes | str) -> Signature:
        return self.sign_message_sync(message)

    async def sign_transaction(self, tx: Transaction | Mapping[str, Any]) -> Signature:
        return self.sign_transaction_sync(tx)

    async def sign_typed_data(self, payload: TypedDataLike) -> Signature:
        return self.sign_typed_data_sync(payload)

    def to_tron_hex_address(self) -> str:
        return to_tron_hex_address(self._address, self._tron_address_prefix)

    def to_tron_b58_address(self) -> str:
        return to_tron_b58_address(self._address, self._tron_address_prefix)

    # never render the digest signer
    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self._address}, chain_id={self._chain_id})"


class LocalWallet(Wallet):
    """A wallet holding its private key in process memory."""

    def __init__(
        self,
        private_key: str | bytes | keys.PrivateKey,
        chain_id: int = 0,
        *,
        tron_address_prefix: int = TRON_ADDRESS_PREFIX,
    ) -> None:
        signer = PrivateKeyDigestSigner(private_key)
        super().__init__(signer, signer.address, chain_id, tron_address_prefix=tron_address_prefix)

    @classmethod
    def from_key(cls, private_key: str | bytes, chain_id: int = 0) -> LocalWallet:
        return cls(private_key, chain_id)

    @classmethod
    def from_config(cls, config: WalletConfig) -> LocalWallet:
        if config.private_key is None:
            raise ConfigurationError("private_key is required")
        return cls(
            config.private_key.get_secret_value(),
            config.chain_id,
            tron_address_prefix=config.tron_address_prefix,
        )

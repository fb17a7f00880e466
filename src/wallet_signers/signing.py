from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union, runtime_checkable

from eth_account._utils.legacy_transactions import serializable_unsigned_transaction_from_dict
from eth_account.messages import defunct_hash_message, encode_typed_data
from eth_utils import keccak

from .address import Address
from .encoding import Digest, parse_uint64
from .exceptions import Eip712Error, SigningError, TransactionEncodingError
from .models import Signature

logger = logging.getLogger(__name__)

_TYPED_TX_FIELDS = frozenset(
    {"accessList", "maxFeePerGas", "maxPriorityFeePerGas", "maxFeePerBlobGas", "authorizationList"}
)


def hash_message(message: bytes | str) -> Digest:
    """
    EIP-191 ``personal_sign`` digest:
    keccak256("\\x19Ethereum Signed Message:\\n" + len(message) + message).
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    return Digest(bytes(defunct_hash_message(primitive=bytes(message))))


@runtime_checkable
class TypedData(Protocol):
    def encode_eip712(self) -> bytes:
        """Returns the 32-byte EIP-712 digest of this payload."""


TypedDataLike = Union[TypedData, Mapping[str, Any]]


def typed_data_hash(payload: TypedDataLike) -> Digest:
    """
    EIP-712 digest of ``payload``.

    Mappings are treated as a full typed-data message (``types``, ``primaryType``,
    ``domain``, ``message``); other payloads must encode themselves.
    """
    try:
        if isinstance(payload, TypedData):
            encoded = bytes(payload.encode_eip712())
        else:
            signable = encode_typed_data(full_message=dict(payload))
            encoded = keccak(b"\x19" + signable.version + signable.header + signable.body)
    except Exception as e:  # noqa: BLE001
        raise Eip712Error(f"cannot encode typed data: {e}") from e
    if len(encoded) != 32:
        raise Eip712Error(f"typed data digest must be 32 bytes, got {len(encoded)}")
    return Digest(encoded)


class Transaction:
    """
    An unsigned transaction in ``eth_account`` dict form.

    Only the chain id is interpreted here; everything else is handed to the
    serializer when the signing hash is computed.
    """

    def __init__(self, fields: Mapping[str, Any]) -> None:
        self._fields = dict(fields)

    @classmethod
    def coerce(cls, tx: Transaction | Mapping[str, Any]) -> Transaction:
        return tx if isinstance(tx, Transaction) else cls(tx)

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    @property
    def chain_id(self) -> Optional[int]:
        value = self._fields.get("chainId")
        if value is None:
            return None
        try:
            return parse_uint64(value)
        except SigningError as e:
            raise TransactionEncodingError(f"invalid chainId: {value!r}") from e

    @property
    def is_typed(self) -> bool:
        tx_type = self._fields.get("type")
        if tx_type is not None and parse_uint64(tx_type) != 0:
            return True
        return any(k in self._fields for k in _TYPED_TX_FIELDS)

    @property
    def is_replay_protected(self) -> bool:
        return self.is_typed or bool(self.chain_id)

    def with_chain_id(self, chain_id: int) -> Transaction:
        fields = dict(self._fields)
        fields["chainId"] = parse_uint64(chain_id)
        return Transaction(fields)

    def sighash(self) -> Digest:
        fields = dict(self._fields)
        # chain id 0 on a legacy transaction means "no replay protection"
        if not self.is_typed and self.chain_id == 0:
            fields.pop("chainId")
        try:
            unsigned = serializable_unsigned_transaction_from_dict(fields)
            return Digest(bytes(unsigned.hash()))
        except Exception as e:  # noqa: BLE001
            raise TransactionEncodingError(f"cannot serialize transaction: {e}") from e

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"Transaction({self._fields!r})"


def recover_address(digest: bytes | Digest | str, signature: Signature | bytes | str) -> Address:
    d = digest if isinstance(digest, Digest) else Digest.from_hash(digest)
    sig = signature if isinstance(signature, Signature) else Signature.from_bytes(signature)
    return sig.recover(d)


def recover_message_address(message: bytes | str, signature: Signature | bytes | str) -> Address:
    return recover_address(hash_message(message), signature)


def verify_message(message: bytes | str, signature: Signature | bytes | str, address: Any) -> bool:
    expected = Address.coerce(address)
    try:
        return recover_message_address(message, signature) == expected
    except SigningError:
        logger.debug("signature recovery failed for %s", expected)
        return False

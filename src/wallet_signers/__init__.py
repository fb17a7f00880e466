"""Signing abstraction for Ethereum-style account keys."""

from .address import (
    TRON_ADDRESS_PREFIX,
    Address,
    from_tron_b58_address,
    to_tron_b58_address,
    to_tron_hex_address,
)
from .encoding import Digest, from_eip155_v, to_eip155_v, to_standard_v
from .exceptions import ConfigurationError, Eip712Error, SigningError, TransactionEncodingError
from .models import RawSignature, Signature, WalletConfig
from .signer import DigestSigner, LocalWallet, PrivateKeyDigestSigner, Signer, Wallet
from .signing import (
    Transaction,
    TypedData,
    hash_message,
    recover_address,
    recover_message_address,
    typed_data_hash,
    verify_message,
)

__all__ = [
    "Address",
    "ConfigurationError",
    "Digest",
    "DigestSigner",
    "Eip712Error",
    "LocalWallet",
    "PrivateKeyDigestSigner",
    "RawSignature",
    "Signature",
    "Signer",
    "SigningError",
    "TRON_ADDRESS_PREFIX",
    "Transaction",
    "TransactionEncodingError",
    "TypedData",
    "Wallet",
    "WalletConfig",
    "from_eip155_v",
    "from_tron_b58_address",
    "hash_message",
    "recover_address",
    "recover_message_address",
    "to_eip155_v",
    "to_standard_v",
    "to_tron_b58_address",
    "to_tron_hex_address",
    "typed_data_hash",
    "verify_message",
]

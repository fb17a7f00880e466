from __future__ import annotations

from typing import Any

import pytest
import rlp
from eth_abi import encode
from eth_account.messages import encode_defunct
from eth_utils import keccak, to_bytes

from wallet_signers.exceptions import Eip712Error, TransactionEncodingError
from wallet_signers.signing import Transaction, hash_message, typed_data_hash


def test_message_hash_manual_equivalence() -> None:
    msg = b"hello"
    manual = keccak(b"\x19Ethereum Signed Message:\n5" + msg)
    assert bytes(hash_message(msg)) == manual
    assert hash_message("hello") == hash_message(msg)


def test_message_hash_is_domain_separated() -> None:
    msg = b"\x11" * 32
    assert bytes(hash_message(msg)) != keccak(msg)
    assert bytes(hash_message(msg)) != msg


def test_message_hash_matches_eth_account_defunct() -> None:
    signable = encode_defunct(primitive=b"I\xe2\x99\xa5SF")
    expected = keccak(b"\x19" + signable.version + signable.header + signable.body)
    assert bytes(hash_message("I♥SF")) == expected


def test_typed_data_hash_known_vector(mail_typed_data: dict[str, Any]) -> None:
    d = typed_data_hash(mail_typed_data)
    assert d.hex() == "0xbe609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2"


def test_typed_data_hash_manual_equivalence(mail_typed_data: dict[str, Any]) -> None:
    def type_hash(s: str) -> bytes:
        return keccak(text=s)

    domain_sep = keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                type_hash(
                    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
                ),
                keccak(text="Ether Mail"),
                keccak(text="1"),
                1,
                "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
            ],
        )
    )
    person = "Person(string name,address wallet)"
    mail = "Mail(Person from,Person to,string contents)" + person

    def person_hash(name: str, wallet: str) -> bytes:
        return keccak(
            encode(
                ["bytes32", "bytes32", "address"],
                [type_hash(person), keccak(text=name), wallet],
            )
        )

    struct_hash = keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "bytes32"],
            [
                type_hash(mail),
                person_hash("Cow", "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"),
                person_hash("Bob", "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"),
                keccak(text="Hello, Bob!"),
            ],
        )
    )
    manual = keccak(b"\x19\x01" + domain_sep + struct_hash)
    assert bytes(typed_data_hash(mail_typed_data)) == manual


def test_typed_data_hash_accepts_self_encoding_payload() -> None:
    class Precomputed:
        def encode_eip712(self) -> bytes:
            return b"\x22" * 32

    assert bytes(typed_data_hash(Precomputed())) == b"\x22" * 32


def test_typed_data_encoder_failure_is_surfaced() -> None:
    class Broken:
        def encode_eip712(self) -> bytes:
            raise ValueError("struct graph has a cycle")

    with pytest.raises(Eip712Error, match="struct graph has a cycle"):
        typed_data_hash(Broken())

    class Short:
        def encode_eip712(self) -> bytes:
            return b"\x01" * 31

    with pytest.raises(Eip712Error):
        typed_data_hash(Short())


def test_malformed_typed_data_mapping_is_rejected(mail_typed_data: dict[str, Any]) -> None:
    missing_message = {k: v for k, v in mail_typed_data.items() if k != "message"}
    with pytest.raises(Eip712Error):
        typed_data_hash(missing_message)

    bad_address = dict(mail_typed_data)
    bad_address["message"] = {
        **mail_typed_data["message"],
        "to": {"name": "Bob", "wallet": "not-an-address"},
    }
    with pytest.raises(Eip712Error):
        typed_data_hash(bad_address)


def test_transaction_chain_id_accessors(legacy_tx: dict[str, Any]) -> None:
    tx = Transaction(legacy_tx)
    assert tx.chain_id is None
    assert not tx.is_typed
    assert not tx.is_replay_protected

    tx2 = tx.with_chain_id(1337)
    assert tx2.chain_id == 1337
    assert tx2.is_replay_protected
    assert tx.chain_id is None
    assert Transaction({**legacy_tx, "chainId": "0x539"}).chain_id == 1337

    typed = Transaction({"type": 2, "chainId": 1})
    assert typed.is_typed
    assert Transaction({"maxFeePerGas": 1}).is_typed


def test_transaction_sighash_depends_on_chain_id(legacy_tx: dict[str, Any]) -> None:
    tx = Transaction(legacy_tx)
    unprotected = tx.sighash()
    assert tx.with_chain_id(0).sighash() == unprotected
    assert tx.with_chain_id(1).sighash() != unprotected
    assert tx.with_chain_id(1).sighash() != tx.with_chain_id(1337).sighash()


def test_transaction_sighash_manual_equivalence(legacy_tx: dict[str, Any]) -> None:
    # rlp([nonce, gasPrice, gas, to, value, data, chainId, 0, 0])
    to = to_bytes(hexstr=legacy_tx["to"])
    encoded = rlp.encode([0, 234567897654321, 2000000, to, 1000000000, b"", 1337, 0, 0])
    assert bytes(Transaction(legacy_tx).with_chain_id(1337).sighash()) == keccak(encoded)


def test_transaction_serializer_failure_is_surfaced() -> None:
    with pytest.raises(TransactionEncodingError):
        Transaction({"nonce": 0}).sighash()
    with pytest.raises(TransactionEncodingError):
        _ = Transaction({"chainId": "nope"}).chain_id

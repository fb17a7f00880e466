from __future__ import annotations

import copy
from typing import Any

import pytest

# EIP-712 "Ether Mail" example
_MAIL_TYPED_DATA: dict[str, Any] = {
    "types": {
        "EIP712Domain": [
            {"name": "name", "type": "string"},
            {"name": "version", "type": "string"},
            {"name": "chainId", "type": "uint256"},
            {"name": "verifyingContract", "type": "address"},
        ],
        "Person": [
            {"name": "name", "type": "string"},
            {"name": "wallet", "type": "address"},
        ],
        "Mail": [
            {"name": "from", "type": "Person"},
            {"name": "to", "type": "Person"},
            {"name": "contents", "type": "string"},
        ],
    },
    "primaryType": "Mail",
    "domain": {
        "name": "Ether Mail",
        "version": "1",
        "chainId": 1,
        "verifyingContract": "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
    },
    "message": {
        "from": {"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"},
        "to": {"name": "Bob", "wallet": "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"},
        "contents": "Hello, Bob!",
    },
}

# eth-account's documented legacy transaction, without its chainId
_LEGACY_TX: dict[str, Any] = {
    "to": "0xF0109fC8DF283027b6285cc889F5aA624EaC1F55",
    "value": 1000000000,
    "gas": 2000000,
    "gasPrice": 234567897654321,
    "nonce": 0,
}


@pytest.fixture
def mail_typed_data() -> dict[str, Any]:
    return copy.deepcopy(_MAIL_TYPED_DATA)


@pytest.fixture
def legacy_tx() -> dict[str, Any]:
    return dict(_LEGACY_TX)

"""Shared fixtures: a scrubbed environment and an in-memory web3 double."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from memo_gc_deployer.compiler import ContractArtifact

ENV_VARS = (
    "COTI_RPC_URL",
    "COTI_TESTNET_RPC_URL",
    "HARDHAT_RPC_URL",
    "DEPLOYER_PRIVATE_KEY",
    "DEPLOYER_ADDRESS",
    "MEMO_GC_OWNER",
    "MEMO_GC_FEE_RECIPIENT",
    "MEMO_GC_FEE_AMOUNT",
    "FLATTEN_COMMAND",
    "MEMO_GC_PROJECT_ROOT",
)

OWNER = "0x1111111111111111111111111111111111111111"
RECIPIENT = "0x2222222222222222222222222222222222222222"
NODE_ACCOUNT = "0x3333333333333333333333333333333333333333"
CONTRACT_ADDRESS = "0x4444444444444444444444444444444444444444"
TX_HASH = bytes.fromhex("ab" * 32)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell and .env out of the tests."""

    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("memo_gc_deployer.cli.load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.setattr("memo_gc_deployer.config.load_dotenv", lambda *args, **kwargs: False)


class FakeConstructor:
    def __init__(self, eth: "FakeEth", args: tuple) -> None:
        self._eth = eth
        self.args = args

    def build_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        self._eth.built.append((self.args, dict(transaction)))
        return dict(transaction, data="0xdeadbeef")

    def transact(self, transaction: Dict[str, Any]) -> bytes:
        self._eth.sent.append({"kind": "transact", "args": self.args, "tx": dict(transaction)})
        return TX_HASH


class FakeFactory:
    def __init__(self, eth: "FakeEth", abi: List[Dict[str, Any]], bytecode: str) -> None:
        self._eth = eth
        self.abi = abi
        self.bytecode = bytecode

    def constructor(self, *args: Any) -> FakeConstructor:
        return FakeConstructor(self._eth, args)


class FakeEth:
    def __init__(self) -> None:
        self.accounts: List[str] = [NODE_ACCOUNT]
        self.chain_id = 2632500
        self.receipt: Dict[str, Any] = {"status": 1, "contractAddress": CONTRACT_ADDRESS}
        self.receipt_error: Optional[Exception] = None
        self.built: List[tuple] = []
        self.sent: List[Dict[str, Any]] = []
        self.calls: List[str] = []

    def contract(self, abi: List[Dict[str, Any]], bytecode: str) -> FakeFactory:
        return FakeFactory(self, abi, bytecode)

    def get_transaction_count(self, address: str) -> int:
        self.calls.append("get_transaction_count")
        return 7

    def send_raw_transaction(self, raw: bytes) -> bytes:
        self.sent.append({"kind": "raw", "raw": raw})
        return TX_HASH

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:  # pragma: no cover - must stay unused
        raise AssertionError("gas must not be estimated")

    def wait_for_transaction_receipt(self, tx_hash: bytes) -> Dict[str, Any]:
        self.calls.append("wait_for_transaction_receipt")
        if self.receipt_error is not None:
            raise self.receipt_error
        return self.receipt


class FakeWeb3:
    def __init__(self) -> None:
        self.eth = FakeEth()


class FakeAccount:
    def __init__(self, address: str = OWNER) -> None:
        self.address = address
        self.signed: List[Dict[str, Any]] = []

    def sign_transaction(self, transaction: Dict[str, Any]):
        self.signed.append(transaction)
        return type("Signed", (), {"raw_transaction": b"signed-raw"})()


@pytest.fixture
def fake_w3() -> FakeWeb3:
    return FakeWeb3()


@pytest.fixture
def artifact() -> ContractArtifact:
    return ContractArtifact(
        contract_name="MemoGC",
        source_name="contracts/MemoGC.sol",
        abi=[
            {
                "inputs": [
                    {"internalType": "address", "name": "initialOwner", "type": "address"},
                    {"internalType": "address", "name": "initialFeeRecipient", "type": "address"},
                    {"internalType": "uint256", "name": "initialFeeAmount", "type": "uint256"},
                ],
                "stateMutability": "nonpayable",
                "type": "constructor",
            }
        ],
        bytecode="0x6080604052",
    )

"""Submit the MemoGC creation transaction and wait for it to be mined."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from eth_account import Account
from web3 import Web3

from .compiler import ContractArtifact
from .config import NetworkConfig
from .errors import ChainIdMismatchError, DeploymentError, SignerUnavailableError
from .params import DeploymentParams

if TYPE_CHECKING:  # pragma: no cover - typing only
    from eth_account.signers.local import LocalAccount

_LOGGER = logging.getLogger(__name__)

# Explicit gas skips eth_estimateGas, which the COTI RPC rejects ("pending block is not available").
DEPLOY_GAS_LIMIT = 8_000_000


@dataclass(frozen=True)
class DeploymentResult:
    address: str
    tx_hash: str
    params: DeploymentParams

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"address": self.address, "txHash": self.tx_hash}
        payload.update(self.params.as_dict())
        return payload


def connect(network: NetworkConfig) -> Web3:
    """Return a ``Web3`` client for ``network``; no request is made yet."""

    return Web3(Web3.HTTPProvider(network.url))


def load_account(network: NetworkConfig) -> Optional["LocalAccount"]:
    if not network.accounts:
        return None
    return Account.from_key(network.accounts[0])


def first_signer_address(w3: Web3, network: NetworkConfig, account: Optional["LocalAccount"] = None) -> str:
    """Return the address of the first signer available on ``network``."""

    if account is None:
        account = load_account(network)
    if account is not None:
        return account.address
    node_accounts = list(w3.eth.accounts) if network.node_managed_accounts else []
    if not node_accounts:
        raise SignerUnavailableError(
            f"No signer configured for network {network.name!r}; set DEPLOYER_PRIVATE_KEY."
        )
    return node_accounts[0]


def check_chain_id(w3: Web3, network: NetworkConfig) -> None:
    actual = w3.eth.chain_id
    if actual != network.chain_id:
        raise ChainIdMismatchError(
            f"Network {network.name!r} expects chain id {network.chain_id} but {network.url} reports {actual}"
        )


def _constructor(w3: Web3, artifact: ContractArtifact, params: DeploymentParams):
    owner, fee_recipient, fee_amount = params.constructor_args()
    factory = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    return factory.constructor(
        Web3.to_checksum_address(owner),
        Web3.to_checksum_address(fee_recipient),
        fee_amount,
    )


def send_deployment(
    w3: Web3,
    artifact: ContractArtifact,
    params: DeploymentParams,
    network: NetworkConfig,
    account: Optional["LocalAccount"] = None,
) -> bytes:
    """Broadcast the creation transaction and return its hash."""

    constructor = _constructor(w3, artifact, params)
    if account is not None:
        txn = constructor.build_transaction({
            "from": account.address,
            "nonce": w3.eth.get_transaction_count(account.address),
            "gas": DEPLOY_GAS_LIMIT,
            "chainId": network.chain_id,
        })
        signed = account.sign_transaction(txn)
        return w3.eth.send_raw_transaction(signed.raw_transaction)

    sender = first_signer_address(w3, network)
    return constructor.transact({"from": sender, "gas": DEPLOY_GAS_LIMIT})


def deploy_memo_gc(
    w3: Web3,
    artifact: ContractArtifact,
    params: DeploymentParams,
    network: NetworkConfig,
    account: Optional["LocalAccount"] = None,
) -> DeploymentResult:
    """Deploy ``artifact`` with ``params`` and block until the receipt arrives.

    A reverted creation raises :class:`DeploymentError`; RPC and timeout errors
    from web3 propagate unchanged.
    """

    tx_hash = send_deployment(w3, artifact, params, network, account)
    tx_hex = Web3.to_hex(tx_hash)
    _LOGGER.info("Deployment transaction %s sent to %s; waiting for receipt", tx_hex, network.name)

    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1 or not receipt.get("contractAddress"):
        raise DeploymentError(f"Deployment transaction {tx_hex} failed (status={receipt['status']})")
    return DeploymentResult(address=receipt["contractAddress"], tx_hash=tx_hex, params=params)


__all__ = [
    "DEPLOY_GAS_LIMIT",
    "DeploymentResult",
    "check_chain_id",
    "connect",
    "deploy_memo_gc",
    "first_signer_address",
    "load_account",
    "send_deployment",
]

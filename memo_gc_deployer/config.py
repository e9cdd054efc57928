"""Static project configuration: networks, compiler settings and paths.

Everything here is read once at startup. Values come from the process
environment (optionally seeded from a ``.env`` file) with literal fallbacks;
nothing is validated beyond the presence check on the deployer key, so a bad
endpoint only surfaces when the network is first used.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .errors import UnknownNetworkError

# Checkout the package was imported from; only meaningful for in-tree runs.
PACKAGE_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_VAR = "MEMO_GC_PROJECT_ROOT"
ROOT_MARKERS = ("hardhat.config.js", "contracts")

COTI_CHAIN_ID = 2632500
DEFAULT_NETWORK = "hardhat"

DEFAULT_LOCAL_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_COTI_RPC_URL = "https://mainnet.coti.io/rpc"
DEFAULT_COTI_TESTNET_RPC_URL = "https://testnet.coti.io/rpc"


@dataclass(frozen=True)
class NetworkConfig:
    """A named JSON-RPC endpoint and the credentials used to sign on it."""

    name: str
    url: str
    chain_id: int
    accounts: Tuple[str, ...] = ()
    # Local dev nodes hold unlocked accounts and sign on our behalf.
    node_managed_accounts: bool = False

    @property
    def can_sign(self) -> bool:
        return bool(self.accounts) or self.node_managed_accounts

    def __repr__(self) -> str:
        # Keep private keys out of logs and tracebacks.
        return (
            f"NetworkConfig(name={self.name!r}, url={self.url!r}, chain_id={self.chain_id}, "
            f"accounts=<{len(self.accounts)} key(s)>, node_managed_accounts={self.node_managed_accounts})"
        )


@dataclass(frozen=True)
class CompilerSettings:
    version: str = "0.8.19"
    optimizer_enabled: bool = True
    optimizer_runs: int = 200
    via_ir: bool = False

    def as_solc_settings(self) -> Dict[str, object]:
        """Return the ``settings`` block of a solc standard-JSON input."""

        return {
            "optimizer": {"enabled": self.optimizer_enabled, "runs": self.optimizer_runs},
            "viaIR": self.via_ir,
        }


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    sources: Path
    cache: Path
    artifacts: Path

    @classmethod
    def under(cls, root: Path) -> "ProjectPaths":
        root = Path(root)
        return cls(root=root, sources=root / "contracts", cache=root / "cache", artifacts=root / "artifacts")


@dataclass(frozen=True)
class ProjectConfig:
    networks: Mapping[str, NetworkConfig]
    compiler: CompilerSettings = field(default_factory=CompilerSettings)
    paths: ProjectPaths = field(default_factory=lambda: ProjectPaths.under(find_project_root()))

    def network(self, name: str) -> NetworkConfig:
        try:
            return self.networks[name]
        except KeyError:
            known = ", ".join(sorted(self.networks))
            raise UnknownNetworkError(f"Unknown network {name!r}; configured networks: {known}") from None


def _get_env() -> Mapping[str, str]:
    """Return ``os.environ`` after merging a local ``.env`` file, if any."""

    load_dotenv()
    return os.environ


def _is_project_root(path: Path) -> bool:
    return any((path / marker).exists() for marker in ROOT_MARKERS)


def find_project_root(env: Optional[Mapping[str, str]] = None, start: Optional[Path] = None) -> Path:
    """Locate the contract project the commands operate on.

    ``MEMO_GC_PROJECT_ROOT`` wins. Otherwise the nearest directory at or above
    ``start`` (the working directory) holding ``hardhat.config.js`` or
    ``contracts/`` is used, then the source checkout this package was
    imported from (never an install directory), and finally ``start`` itself.
    """

    if env is None:
        env = os.environ
    override = env.get(PROJECT_ROOT_VAR)
    if override:
        return Path(override).expanduser().resolve()

    start = Path(start if start is not None else Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if _is_project_root(candidate):
            return candidate
    if (PACKAGE_ROOT / "pyproject.toml").is_file() and _is_project_root(PACKAGE_ROOT):
        return PACKAGE_ROOT
    return start


def _deployer_accounts(env: Mapping[str, str]) -> Tuple[str, ...]:
    private_key = env.get("DEPLOYER_PRIVATE_KEY")
    return (private_key,) if private_key else ()


def build_networks(env: Mapping[str, str]) -> Dict[str, NetworkConfig]:
    accounts = _deployer_accounts(env)
    return {
        "hardhat": NetworkConfig(
            name="hardhat",
            url=env.get("HARDHAT_RPC_URL", DEFAULT_LOCAL_RPC_URL),
            chain_id=COTI_CHAIN_ID,
            node_managed_accounts=True,
        ),
        "coti-mainnet": NetworkConfig(
            name="coti-mainnet",
            url=env.get("COTI_RPC_URL", DEFAULT_COTI_RPC_URL),
            chain_id=COTI_CHAIN_ID,
            accounts=accounts,
        ),
        "coti-testnet": NetworkConfig(
            name="coti-testnet",
            url=env.get("COTI_TESTNET_RPC_URL", DEFAULT_COTI_TESTNET_RPC_URL),
            chain_id=COTI_CHAIN_ID,
            accounts=accounts,
        ),
    }


def load_config(env: Optional[Mapping[str, str]] = None, *, root: Optional[Path] = None) -> ProjectConfig:
    """Build the project configuration from ``env`` (defaults to the process environment)."""

    if env is None:
        env = _get_env()
    paths = ProjectPaths.under(root if root is not None else find_project_root(env))
    return ProjectConfig(networks=build_networks(env), paths=paths)


__all__ = [
    "COTI_CHAIN_ID",
    "CompilerSettings",
    "DEFAULT_NETWORK",
    "NetworkConfig",
    "PACKAGE_ROOT",
    "ProjectConfig",
    "ProjectPaths",
    "find_project_root",
    "load_config",
]

"""Build and deployment tooling for the MemoGC contract."""
from __future__ import annotations

from .compiler import ContractArtifact, compile_contract
from .config import NetworkConfig, ProjectConfig, load_config
from .deployer import DEPLOY_GAS_LIMIT, DeploymentResult, deploy_memo_gc, first_signer_address
from .errors import MemoGCError
from .flatten import flatten_contract
from .params import DeploymentParams, resolve_deployment_params

__all__ = [
    "ContractArtifact",
    "DEPLOY_GAS_LIMIT",
    "DeploymentParams",
    "DeploymentResult",
    "MemoGCError",
    "NetworkConfig",
    "ProjectConfig",
    "compile_contract",
    "deploy_memo_gc",
    "first_signer_address",
    "flatten_contract",
    "load_config",
    "resolve_deployment_params",
]

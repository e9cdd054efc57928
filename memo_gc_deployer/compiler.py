"""Compile the project's Solidity sources with ``py-solc-x``.

Artifacts follow the usual contract-framework layout
(``artifacts/contracts/MemoGC.sol/MemoGC.json``) so the deploy step and any
external verification tooling can share them. A content hash of the compiler
input is kept under ``cache/`` and reused when nothing changed.
"""
from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import solcx

from .config import ProjectConfig
from .errors import CompilationError

_LOGGER = logging.getLogger(__name__)

CACHE_FILENAME = "memo-gc-solc-cache.json"
NODE_MODULES = "node_modules"


@dataclass(frozen=True)
class ContractArtifact:
    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]]
    bytecode: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "contractName": self.contract_name,
            "sourceName": self.source_name,
            "abi": self.abi,
            "bytecode": self.bytecode,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ContractArtifact":
        return cls(
            contract_name=payload["contractName"],
            source_name=payload["sourceName"],
            abi=payload["abi"],
            bytecode=payload["bytecode"],
        )


def _source_name(config: ProjectConfig, path: Path) -> str:
    return path.relative_to(config.paths.root).as_posix()


def collect_sources(config: ProjectConfig) -> Dict[str, Dict[str, str]]:
    """Map source names (relative to the project root) to their contents."""

    sources: Dict[str, Dict[str, str]] = {}
    for path in sorted(config.paths.sources.rglob("*.sol")):
        sources[_source_name(config, path)] = {"content": path.read_text(encoding="utf-8")}
    if not sources:
        raise CompilationError(f"No Solidity sources found under {config.paths.sources}")
    return sources


def _remappings(config: ProjectConfig) -> List[str]:
    node_modules = config.paths.root / NODE_MODULES
    if not node_modules.is_dir():
        return []
    return [
        f"{package.name}/={NODE_MODULES}/{package.name}/"
        for package in sorted(node_modules.iterdir())
        if package.name.startswith("@") and package.is_dir()
    ]


def build_standard_input(config: ProjectConfig) -> Dict[str, Any]:
    settings: Dict[str, Any] = dict(config.compiler.as_solc_settings())
    settings["remappings"] = _remappings(config)
    settings["outputSelection"] = {"*": {"*": ["abi", "evm.bytecode.object"]}}
    return {"language": "Solidity", "sources": collect_sources(config), "settings": settings}


def input_digest(standard_input: Dict[str, Any], solc_version: str) -> str:
    payload = json.dumps({"solc": solc_version, "input": standard_input}, sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def artifact_path(config: ProjectConfig, source_name: str, contract_name: str) -> Path:
    return config.paths.artifacts / source_name / f"{contract_name}.json"


def _cache_path(config: ProjectConfig) -> Path:
    return config.paths.cache / CACHE_FILENAME


def _read_cache(config: ProjectConfig) -> Dict[str, Any]:
    path = _cache_path(config)
    if not path.is_file():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        _LOGGER.warning("Ignoring corrupt compiler cache at %s", path)
        return {}


def _write_cache(config: ProjectConfig, digest: str, contracts: Dict[str, str]) -> None:
    path = _cache_path(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"digest": digest, "solcVersion": config.compiler.version, "contracts": contracts}
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_artifact(path: Path) -> ContractArtifact:
    return ContractArtifact.from_dict(json.loads(path.read_text(encoding="utf-8")))


def _cached_artifact(config: ProjectConfig, digest: str, contract_name: str) -> Optional[ContractArtifact]:
    cache = _read_cache(config)
    if cache.get("digest") != digest:
        return None
    source_name = cache.get("contracts", {}).get(contract_name)
    if not source_name:
        return None
    path = artifact_path(config, source_name, contract_name)
    if not path.is_file():
        return None
    return load_artifact(path)


def ensure_solc(version: str) -> None:
    installed = {str(v) for v in solcx.get_installed_solc_versions()}
    if version not in installed:
        _LOGGER.info("Installing solc %s", version)
        solcx.install_solc(version)


def write_artifacts(config: ProjectConfig, output: Dict[str, Any]) -> Dict[str, str]:
    """Write one artifact per compiled contract; return ``{contract: source_name}``."""

    written: Dict[str, str] = {}
    for source_name, contracts in output.get("contracts", {}).items():
        for contract_name, data in contracts.items():
            artifact = ContractArtifact(
                contract_name=contract_name,
                source_name=source_name,
                abi=data.get("abi", []),
                bytecode="0x" + data.get("evm", {}).get("bytecode", {}).get("object", ""),
            )
            path = artifact_path(config, source_name, contract_name)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(artifact.as_dict(), indent=2), encoding="utf-8")
            written[contract_name] = source_name
    return written


def compile_contract(config: ProjectConfig, name: str = "MemoGC", *, force: bool = False) -> ContractArtifact:
    """Return the artifact for ``name``, compiling the sources when they changed."""

    standard_input = build_standard_input(config)
    version = config.compiler.version
    digest = input_digest(standard_input, version)

    if not force:
        cached = _cached_artifact(config, digest, name)
        if cached is not None:
            _LOGGER.info("Nothing to compile; using cached artifact for %s", name)
            return cached

    ensure_solc(version)
    _LOGGER.info("Compiling %d source file(s) with solc %s", len(standard_input["sources"]), version)
    output = solcx.compile_standard(
        standard_input,
        solc_version=version,
        base_path=str(config.paths.root),
        allow_paths=[str(config.paths.root)],
    )
    written = write_artifacts(config, output)
    _write_cache(config, digest, written)

    if name not in written:
        raise CompilationError(f"Contract {name!r} not found in compiler output; got {sorted(written)}")
    return load_artifact(artifact_path(config, written[name], name))


__all__ = [
    "ContractArtifact",
    "artifact_path",
    "build_standard_input",
    "collect_sources",
    "compile_contract",
    "load_artifact",
]

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from memo_gc_deployer import compiler
from memo_gc_deployer.compiler import artifact_path, build_standard_input, compile_contract
from memo_gc_deployer.config import load_config
from memo_gc_deployer.errors import CompilationError

MEMO_GC_SOURCE = "pragma solidity 0.8.19;\nimport './lib/Fees.sol';\ncontract MemoGC is Fees {}\n"
FEES_SOURCE = "pragma solidity 0.8.19;\ncontract Fees {}\n"
ABI = [{"type": "constructor", "inputs": [], "stateMutability": "nonpayable"}]


class FakeSolc:
    def __init__(self, installed: List[str]) -> None:
        self.installed = list(installed)
        self.install_calls: List[str] = []
        self.compile_calls: List[Dict[str, Any]] = []

    def get_installed_solc_versions(self):
        return list(self.installed)

    def install_solc(self, version: str):
        self.install_calls.append(version)
        self.installed.append(version)

    def compile_standard(self, input_data, **kwargs):
        self.compile_calls.append({"input": input_data, **kwargs})
        return {
            "contracts": {
                "contracts/MemoGC.sol": {"MemoGC": {"abi": ABI, "evm": {"bytecode": {"object": "6080"}}}},
                "contracts/lib/Fees.sol": {"Fees": {"abi": [], "evm": {"bytecode": {"object": "6081"}}}},
            }
        }


@pytest.fixture
def project(tmp_path: Path):
    (tmp_path / "contracts" / "lib").mkdir(parents=True)
    (tmp_path / "contracts" / "MemoGC.sol").write_text(MEMO_GC_SOURCE, encoding="utf-8")
    (tmp_path / "contracts" / "lib" / "Fees.sol").write_text(FEES_SOURCE, encoding="utf-8")
    return load_config({}, root=tmp_path)


@pytest.fixture
def fake_solc(monkeypatch: pytest.MonkeyPatch) -> FakeSolc:
    fake = FakeSolc(installed=["0.8.19"])
    monkeypatch.setattr(compiler.solcx, "get_installed_solc_versions", fake.get_installed_solc_versions)
    monkeypatch.setattr(compiler.solcx, "install_solc", fake.install_solc)
    monkeypatch.setattr(compiler.solcx, "compile_standard", fake.compile_standard)
    return fake


def test_standard_input_carries_sources_and_optimizer_settings(project):
    (project.paths.root / "node_modules" / "@openzeppelin").mkdir(parents=True)

    standard_input = build_standard_input(project)

    assert standard_input["language"] == "Solidity"
    assert set(standard_input["sources"]) == {"contracts/MemoGC.sol", "contracts/lib/Fees.sol"}
    assert standard_input["sources"]["contracts/MemoGC.sol"]["content"] == MEMO_GC_SOURCE
    settings = standard_input["settings"]
    assert settings["optimizer"] == {"enabled": True, "runs": 200}
    assert settings["viaIR"] is False
    assert settings["remappings"] == ["@openzeppelin/=node_modules/@openzeppelin/"]


def test_compile_writes_artifacts_and_returns_requested_contract(project, fake_solc):
    artifact = compile_contract(project)

    assert artifact.contract_name == "MemoGC"
    assert artifact.source_name == "contracts/MemoGC.sol"
    assert artifact.abi == ABI
    assert artifact.bytecode == "0x6080"

    path = artifact_path(project, "contracts/MemoGC.sol", "MemoGC")
    assert path == project.paths.artifacts / "contracts" / "MemoGC.sol" / "MemoGC.json"
    assert json.loads(path.read_text(encoding="utf-8"))["contractName"] == "MemoGC"
    assert artifact_path(project, "contracts/lib/Fees.sol", "Fees").is_file()
    assert fake_solc.compile_calls[0]["solc_version"] == "0.8.19"
    assert fake_solc.install_calls == []


def test_compile_installs_missing_solc(project, fake_solc):
    fake_solc.installed = []

    compile_contract(project)

    assert fake_solc.install_calls == ["0.8.19"]


def test_unchanged_sources_reuse_cached_artifact(project, fake_solc):
    compile_contract(project)
    compile_contract(project)
    assert len(fake_solc.compile_calls) == 1

    compile_contract(project, force=True)
    assert len(fake_solc.compile_calls) == 2


def test_changed_sources_trigger_recompilation(project, fake_solc):
    compile_contract(project)
    (project.paths.sources / "MemoGC.sol").write_text(MEMO_GC_SOURCE + "// edit\n", encoding="utf-8")

    compile_contract(project)

    assert len(fake_solc.compile_calls) == 2


def test_corrupt_cache_is_ignored(project, fake_solc):
    compile_contract(project)
    (project.paths.cache / "memo-gc-solc-cache.json").write_text("{not json", encoding="utf-8")

    assert compile_contract(project).contract_name == "MemoGC"
    assert len(fake_solc.compile_calls) == 2


def test_missing_contract_raises(project, fake_solc):
    with pytest.raises(CompilationError):
        compile_contract(project, "Nope")


def test_missing_sources_raise(tmp_path: Path, fake_solc):
    with pytest.raises(CompilationError):
        compile_contract(load_config({}, root=tmp_path))
    assert fake_solc.compile_calls == []

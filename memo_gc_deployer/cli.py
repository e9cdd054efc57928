"""Command line entry points for compiling, deploying and flattening MemoGC."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

from .compiler import artifact_path, compile_contract
from .config import DEFAULT_NETWORK, find_project_root, load_config
from .deployer import check_chain_id, connect, deploy_memo_gc, first_signer_address, load_account
from .flatten import DEFAULT_CONTRACT, flatten_contract
from .params import resolve_deployment_params

CONTRACT_NAME = "MemoGC"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )


def _add_log_level(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging verbosity (DEBUG, INFO, WARNING)",
    )


def _build_deploy_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile and deploy the MemoGC contract.")
    parser.add_argument(
        "--network",
        default=DEFAULT_NETWORK,
        help=f"Configured network to deploy to (default: {DEFAULT_NETWORK}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the deployment summary as JSON for downstream scripting.",
    )
    _add_log_level(parser)
    return parser


def run_deploy(network_name: str, env: Mapping[str, str]):
    config = load_config(env)
    network = config.network(network_name)
    account = load_account(network)
    w3 = connect(network)

    params = resolve_deployment_params(env, lambda: first_signer_address(w3, network, account))
    check_chain_id(w3, network)
    artifact = compile_contract(config, CONTRACT_NAME)
    return deploy_memo_gc(w3, artifact, params, network, account)


def deploy_main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_deploy_parser().parse_args(argv)
    configure_logging(args.log_level)
    load_dotenv()

    try:
        result = run_deploy(args.network, os.environ)
    except Exception:
        logging.exception("MemoGC deployment to %s failed", args.network)
        return 1

    if args.json:
        json.dump(result.as_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    print("MemoGC deployed to:", result.address)
    print("  owner:", result.params.owner)
    print("  feeRecipient:", result.params.fee_recipient)
    print("  feeAmount:", result.params.fee_amount)
    return 0


def flatten_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Flatten a contract into MemoGC_flat.sol for verification.")
    parser.add_argument(
        "contract",
        nargs="?",
        default=DEFAULT_CONTRACT,
        help=f"Contract source to flatten (default: {DEFAULT_CONTRACT}).",
    )
    _add_log_level(parser)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        out_path = flatten_contract(args.contract, root=find_project_root())
    except Exception:
        logging.exception("Flattening %s failed", args.contract)
        return 1

    print("Flattened to", out_path)
    return 0


def compile_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compile the project's Solidity sources into artifacts/.")
    parser.add_argument("--contract", default=CONTRACT_NAME, help="Contract whose artifact to report.")
    parser.add_argument("--force", action="store_true", help="Recompile even when the cache is current.")
    _add_log_level(parser)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config()
        artifact = compile_contract(config, args.contract, force=args.force)
    except Exception:
        logging.exception("Compilation failed")
        return 1

    path = artifact_path(config, artifact.source_name, artifact.contract_name)
    print(f"Compiled {artifact.contract_name} ({len(artifact.bytecode) // 2 - 1} bytes) -> {path}")
    return 0


__all__ = ["compile_main", "configure_logging", "deploy_main", "flatten_main", "run_deploy"]

#!/usr/bin/env python3
"""Compile the Solidity sources under ``contracts/`` into ``artifacts/``."""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from memo_gc_deployer.cli import compile_main as main

if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())

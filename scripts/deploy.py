#!/usr/bin/env python3
"""Deploy MemoGC to a configured network.

Usage::

    python scripts/deploy.py --network coti-testnet

Owner, fee recipient and fee amount come from ``MEMO_GC_OWNER`` (or
``DEPLOYER_ADDRESS``), ``MEMO_GC_FEE_RECIPIENT`` and ``MEMO_GC_FEE_AMOUNT``.
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from memo_gc_deployer.cli import deploy_main as main

if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())

"""Flatten a contract and its imports into a single file for source verification."""
from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from .config import find_project_root
from .errors import FlattenError

_LOGGER = logging.getLogger(__name__)

DEFAULT_CONTRACT = "contracts/MemoGC.sol"
DEFAULT_FLATTEN_COMMAND = "npx hardhat flatten"
FLAT_FILENAME = "MemoGC_flat.sol"
MAX_OUTPUT_BYTES = 50 * 1024 * 1024


def flatten_command(contract: str, command: Optional[Union[str, Sequence[str]]] = None) -> list[str]:
    """Return the argv used to flatten ``contract``.

    ``command`` overrides the base command; otherwise ``FLATTEN_COMMAND`` or
    ``npx hardhat flatten`` is used.
    """

    if command is None:
        command = os.getenv("FLATTEN_COMMAND") or DEFAULT_FLATTEN_COMMAND
    base = shlex.split(command) if isinstance(command, str) else list(command)
    return [*base, contract]


def flatten_contract(
    contract: str = DEFAULT_CONTRACT,
    out_path: Optional[Path] = None,
    *,
    root: Optional[Path] = None,
    command: Optional[Union[str, Sequence[str]]] = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> Path:
    """Run the flatten command for ``contract`` and write its stdout to ``out_path``.

    The command runs in ``root`` (located with :func:`find_project_root` when
    omitted) and the output defaults to ``MemoGC_flat.sol`` in that directory.

    A non-zero exit raises :class:`subprocess.CalledProcessError`; output above
    :data:`MAX_OUTPUT_BYTES` raises :class:`FlattenError`.
    """

    root = Path(root) if root is not None else find_project_root()
    if out_path is None:
        out_path = root / FLAT_FILENAME

    argv = flatten_command(contract, command)
    _LOGGER.info("Running %s", shlex.join(argv))
    result = runner(argv, cwd=str(root), check=True, capture_output=True, text=True, encoding="utf-8")

    output = result.stdout or ""
    size = len(output.encode("utf-8"))
    if size > MAX_OUTPUT_BYTES:
        raise FlattenError(f"Flattened output of {contract} is {size} bytes, above the {MAX_OUTPUT_BYTES} byte limit")

    out_path = Path(out_path)
    out_path.write_text(output, encoding="utf-8")
    return out_path.resolve()


__all__ = [
    "DEFAULT_CONTRACT",
    "FLAT_FILENAME",
    "MAX_OUTPUT_BYTES",
    "flatten_command",
    "flatten_contract",
]

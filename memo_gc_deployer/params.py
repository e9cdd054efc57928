"""Resolve MemoGC constructor arguments from the environment."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from .errors import ParameterError

OWNER_VARS = ("MEMO_GC_OWNER", "DEPLOYER_ADDRESS")
FEE_RECIPIENT_VAR = "MEMO_GC_FEE_RECIPIENT"
FEE_AMOUNT_VAR = "MEMO_GC_FEE_AMOUNT"
DEFAULT_FEE_AMOUNT = "0"

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")


@dataclass(frozen=True)
class DeploymentParams:
    """Constructor arguments for ``MemoGC(owner, feeRecipient, feeAmount)``."""

    owner: str
    fee_recipient: str
    fee_amount: int

    def constructor_args(self) -> tuple:
        return (self.owner, self.fee_recipient, self.fee_amount)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "feeRecipient": self.fee_recipient,
            "feeAmount": str(self.fee_amount),
        }


def parse_fee_amount(raw: str) -> int:
    """Parse a fee amount as an arbitrary precision, non-negative integer.

    ASCII decimal digits (optionally signed) and ``0x``-prefixed hex are
    accepted, surrounding whitespace is ignored and a blank value counts as
    zero.
    """

    text = raw.strip()
    if not text:
        return 0
    # int() alone would also take "1_000" and non-ASCII digits.
    if _DECIMAL.fullmatch(text):
        value = int(text, 10)
    elif _HEX.fullmatch(text):
        value = int(text, 16)
    else:
        raise ParameterError(f"{FEE_AMOUNT_VAR} must be an integer, got {raw!r}")
    if value < 0:
        raise ParameterError(f"{FEE_AMOUNT_VAR} must not be negative, got {raw!r}")
    return value


def resolve_owner(env: Mapping[str, str], default_signer: Callable[[], str]) -> str:
    for name in OWNER_VARS:
        if name in env:
            owner = env[name]
            break
    else:
        owner = default_signer()
    if not owner:
        raise ParameterError("Unable to determine the initial owner; set MEMO_GC_OWNER or DEPLOYER_ADDRESS.")
    return owner


def resolve_deployment_params(env: Mapping[str, str], default_signer: Callable[[], str]) -> DeploymentParams:
    """Resolve owner, fee recipient and fee amount.

    The fee amount is parsed first so a malformed value fails before
    ``default_signer`` (which may query the node) is ever called.
    """

    fee_amount = parse_fee_amount(env.get(FEE_AMOUNT_VAR, DEFAULT_FEE_AMOUNT))
    owner = resolve_owner(env, default_signer)
    fee_recipient = env[FEE_RECIPIENT_VAR] if FEE_RECIPIENT_VAR in env else owner
    return DeploymentParams(owner=owner, fee_recipient=fee_recipient, fee_amount=fee_amount)


__all__ = [
    "DeploymentParams",
    "parse_fee_amount",
    "resolve_deployment_params",
    "resolve_owner",
]

"""Exception types raised by the MemoGC deployment tooling."""
from __future__ import annotations


class MemoGCError(RuntimeError):
    """Base class for failures raised by this package."""


class ConfigError(MemoGCError):
    """Raised when the project configuration cannot satisfy a request."""


class UnknownNetworkError(ConfigError, KeyError):
    """Raised when a network name is not declared in the configuration."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return str(self.args[0]) if self.args else ""


class ParameterError(MemoGCError, ValueError):
    """Raised when a deployment parameter cannot be resolved from the environment."""


class SignerUnavailableError(MemoGCError):
    """Raised when no account is available to sign the deployment."""


class ChainIdMismatchError(MemoGCError):
    """Raised when the RPC endpoint reports a different chain than configured."""


class CompilationError(MemoGCError):
    """Raised when solc output does not contain the requested contract."""


class DeploymentError(MemoGCError):
    """Raised when the creation transaction does not yield a live contract."""


class FlattenError(MemoGCError):
    """Raised when the external flatten command produces unusable output."""


__all__ = [
    "ChainIdMismatchError",
    "CompilationError",
    "ConfigError",
    "DeploymentError",
    "FlattenError",
    "MemoGCError",
    "ParameterError",
    "SignerUnavailableError",
    "UnknownNetworkError",
]

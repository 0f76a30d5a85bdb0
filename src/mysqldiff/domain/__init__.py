"""Domain-level types shared across the engine, providers and commands."""

from .errors import (
    ConfigError,
    MalformedMetadataError,
    MySQLDiffError,
    ProviderError,
    SinkWriteError,
)

__all__ = [
    "MySQLDiffError",
    "ConfigError",
    "ProviderError",
    "MalformedMetadataError",
    "SinkWriteError",
]

"""Unified error taxonomy for schema comparison runs."""

from dataclasses import dataclass


@dataclass(slots=True)
class MySQLDiffError(Exception):
    """Base class for all mysqldiff failures."""

    message: str
    code: str

    def __str__(self) -> str:
        return self.message


class ConfigError(MySQLDiffError):
    """Raised when the config file is missing or invalid."""


class ProviderError(MySQLDiffError):
    """Raised when schema metadata cannot be fetched. Fatal to the run."""


class MalformedMetadataError(MySQLDiffError):
    """Raised when one table's metadata is inconsistent.

    Only the affected table is skipped; the rest of the schema comparison continues.
    """


class SinkWriteError(MySQLDiffError):
    """Raised when generated SQL (or a snapshot file) cannot be written. Fatal."""

"""Metadata providers for mysqldiff."""

from .base import MetadataProvider
from .mysql import MySQLMetadataProvider

__all__ = ["MetadataProvider", "MySQLMetadataProvider"]

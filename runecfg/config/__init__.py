"""Resolved configuration, query API and export."""

from runecfg.config.export import dumps, export_document, export_namespace, export_value
from runecfg.config.model import RuneConfig
from runecfg.config.query import extract, find_value
from runecfg.resolve.session import Namespace

__all__ = [
    "Namespace",
    "RuneConfig",
    "dumps",
    "export_document",
    "export_namespace",
    "export_value",
    "extract",
    "find_value",
]

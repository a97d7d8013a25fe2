"""
Catalog Infrastructure Module

Exports:
    - JsonAppCatalog: Read-only model/app catalog loaded from JSON
"""

from .json_catalog import DEFAULT_CATALOG_PATH, JsonAppCatalog

__all__ = ["JsonAppCatalog", "DEFAULT_CATALOG_PATH"]

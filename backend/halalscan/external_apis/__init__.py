"""
External collaborators: static catalog transport and the Gemini advisor.
"""
from .catalog_source import CatalogSource, fetch_catalog_records, read_catalog_file, default_catalog_source
from .gemini import GeminiAdvisor

__all__ = [
    "CatalogSource",
    "fetch_catalog_records",
    "read_catalog_file",
    "default_catalog_source",
    "GeminiAdvisor",
]

"""
i18n-extract - Extract translation keys from source files into JSON assets.
"""

from .config.schema import ExtractOptions
from .extract.pipeline import ExtractionResult, extract, run_extraction

__all__ = ["ExtractOptions", "ExtractionResult", "extract", "run_extraction"]

"""Persistent stores used by the scanner."""

from .result_cache import ResultCache, fingerprint_source

__all__ = ["ResultCache", "fingerprint_source"]

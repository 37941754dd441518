"""Loaders — persist normalized perícias to the record store."""

from processing.loaders.store import DuplicateBusinessKeyError, PericiaStore, StoreError

__all__ = [
    "DuplicateBusinessKeyError",
    "PericiaStore",
    "StoreError",
]

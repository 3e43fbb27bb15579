"""Mapping store implementations."""

from .base import MappingNotFound, MappingStore
from .memory import InMemoryMappingStore
from .json_store import JsonMappingStore

__all__ = [
    "MappingNotFound",
    "MappingStore",
    "InMemoryMappingStore",
    "JsonMappingStore",
]

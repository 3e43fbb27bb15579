"""Mapping rule model and default mapping seeding."""

from .mapping import InvalidTargetPath, MappingRule, MappingType, TargetPath
from .seeder import DefaultMappingSeeder, ensure_default_mappings, seed_defaults

__all__ = [
    "InvalidTargetPath",
    "MappingRule",
    "MappingType",
    "TargetPath",
    "DefaultMappingSeeder",
    "ensure_default_mappings",
    "seed_defaults",
]

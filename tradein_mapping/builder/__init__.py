"""
Payload Builder Module

Builds commerce platform product payloads from trade-in records with:
- Template expansion ({field}, {field|default}, {field.method()})
- Field mapping rules grouped by product / variant / metadata
- One-level nested target paths
- Metafield slot grouping (metafields[N].key/namespace/value_type/value)
"""

from .payload_builder import PayloadBuilder, PayloadDefaults, build_metafields, build_sku
from .field_builder import FieldBuilder, transform_data, write_path
from .template_engine import TemplateEngine, apply_template
from .record_builder import build_template_data

__all__ = [
    "PayloadBuilder",
    "PayloadDefaults",
    "FieldBuilder",
    "TemplateEngine",
    "apply_template",
    "transform_data",
    "write_path",
    "build_metafields",
    "build_sku",
    "build_template_data",
]

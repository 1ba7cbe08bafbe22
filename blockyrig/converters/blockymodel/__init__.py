"""
Bone Model ↔ BlockyModel Converters

Conversion between the absolute-pivot bone tree and the engine's
parent-relative .blockymodel node tree. Both directions are exact inverses
for well-formed models.
"""

from .exporter import export_blockymodel, bones_to_nodes, to_blockymodel
from .importer import import_blockymodel, nodes_to_bones

__all__ = [
    'export_blockymodel',
    'bones_to_nodes',
    'to_blockymodel',
    'import_blockymodel',
    'nodes_to_bones',
]

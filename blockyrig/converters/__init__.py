"""Format converters for BlockyRig models"""

from blockyrig.converters.blockymodel.exporter import export_blockymodel, bones_to_nodes
from blockyrig.converters.blockymodel.importer import import_blockymodel, nodes_to_bones
from blockyrig.converters.blockyanim.exporter import export_blockyanim, export_animations

__all__ = [
    "export_blockymodel",
    "bones_to_nodes",
    "import_blockymodel",
    "nodes_to_bones",
    "export_blockyanim",
    "export_animations",
]

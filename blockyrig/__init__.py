"""
BlockyRig - Box UV atlas packing and bone/node-tree conversion for voxel models

Converts block-style bone models between the absolute-pivot editing form,
the engine's parent-relative .blockymodel node tree, and a packed square
box UV texture atlas.
"""

from blockyrig.schema.bonemodel import ModelGeometry, parse_model
from blockyrig.converters.blockymodel import export_blockymodel, import_blockymodel
from blockyrig.converters.convert import convert
from blockyrig.texturing import pack_model_uvs, rescale_model_uvs, render_layout

__version__ = "0.1.0"
__all__ = [
    "ModelGeometry",
    "parse_model",
    "export_blockymodel",
    "import_blockymodel",
    "convert",
    "pack_model_uvs",
    "rescale_model_uvs",
    "render_layout",
]

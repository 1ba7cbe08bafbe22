"""
Texturing utilities for bone models.

Box UV geometry, shelf packing of cube footprints into a square atlas,
atlas rescaling and the layout reference image.
"""
from .box_uv import density_scale, footprint, face_rects, texture_layout, uv_from_texture_layout
from .shelf_packer import PackItem, PackResult, pack
from .atlas_packer import UVPackResult, pack_model_uvs, rescale_uv, rescale_model_uvs
from .layout_renderer import render_layout, render_layout_png, render_layout_data_url

__all__ = [
    'density_scale',
    'footprint',
    'face_rects',
    'texture_layout',
    'uv_from_texture_layout',
    'PackItem',
    'PackResult',
    'pack',
    'UVPackResult',
    'pack_model_uvs',
    'rescale_uv',
    'rescale_model_uvs',
    'render_layout',
    'render_layout_png',
    'render_layout_data_url',
]

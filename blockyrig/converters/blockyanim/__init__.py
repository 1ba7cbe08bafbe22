"""Bone model animations → .blockyanim converters"""

from .exporter import export_blockyanim, export_animations

__all__ = ['export_blockyanim', 'export_animations']

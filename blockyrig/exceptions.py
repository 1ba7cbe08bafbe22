"""Custom exceptions for model transform operations"""


class BlockyRigError(Exception):
    """Base exception for BlockyRig errors"""
    pass


class StructuralError(BlockyRigError, ValueError):
    """Malformed tree: missing geometry fields, dangling parent, cycle, duplicate name"""

    def __init__(self, message, node=None):
        super().__init__(message)
        self.node = node


class DegenerateGeometryError(BlockyRigError, ValueError):
    """Cube with a zero or negative size component"""

    def __init__(self, message, bone=None, cube_index=None, size=None):
        super().__init__(message)
        self.bone = bone
        self.cube_index = cube_index
        self.size = size

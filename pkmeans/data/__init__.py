from .points import PointSet
from .io import file_read, file_write, write_binary

__all__ = ["PointSet", "file_read", "file_write", "write_binary"]

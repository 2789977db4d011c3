"""I/O helper subpackage."""
from . import writer

__all__ = ["writer"]

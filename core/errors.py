"""
errors.py - Copy Error Types

Every failure that can abort a copy derives from CopyError.
Plain OSError / UnicodeError from reading or writing are not wrapped.
"""

from pathlib import Path
from typing import Optional, Union


class CopyError(Exception):
    """Base class for copy failures"""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class InvalidSourceError(CopyError):
    """Source does not exist or is not a directory"""


class InvalidDestinationError(CopyError):
    """Destination already exists, has no parent, or lies inside the source"""


class DestinationCollisionError(CopyError):
    """A target path already exists or would be written twice"""


class SymlinkLoopError(CopyError):
    """Followed symbolic links lead back to an ancestor directory"""

from pathlib import Path
from typing import Optional

from single_source import get_version

# installed distribution metadata first, project files of a source checkout second
__version__: Optional[str] = get_version("cameraunit", Path(__file__).parent.parent, default_return=None)


def version() -> str:
    """Returns the package version, or 0.0.0 if it cannot be determined."""
    return __version__ or "0.0.0"


__all__ = ["version", "__version__"]

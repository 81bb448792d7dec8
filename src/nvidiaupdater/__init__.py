"""
nvidiaupdater - Defer nVidia driver updates until they can be applied safely
"""

__version__ = "0.1.0"

from .core import NvidiaUpdater, UpdaterError

__all__ = ["NvidiaUpdater", "UpdaterError"]

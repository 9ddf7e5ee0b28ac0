# Core modules

from .config import Settings, get_settings
from .errors import PosError

__all__ = ["Settings", "get_settings", "PosError"]

from .store import ConfigStore, ConfigFile
from .validator import validate, diagnostic_for

__all__ = ["ConfigStore", "ConfigFile", "validate", "diagnostic_for"]
__version__ = "0.1.0"

from .config_manager import Config, Settings
from .logger_utils import Log, setup_logging

__all__ = ["Config", "Settings", "Log", "setup_logging"]

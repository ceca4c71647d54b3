from motionblocks.managers.config_manager import ConfigManager, load_config

__all__ = ["ConfigManager", "load_config"]

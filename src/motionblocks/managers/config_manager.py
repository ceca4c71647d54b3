"""
Config Manager

Loads the editor configuration from modular YAML files (include system)
with a factory-defaults fallback, and turns it into an EditorConfig.
"""

import yaml
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from motionblocks.models.config import EditorConfig
from motionblocks.models.enums import LogLevel, StepIdStrategy
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config" / "editor.yaml"
DEFAULT_FACTORY_PATH = PACKAGE_DIR / "config" / "factory_defaults.yaml"

_DEFAULTS = EditorConfig()


class ConfigManager:
    """
    Editor configuration manager with include system support

    Loads editor.yaml and processes its include: directive. If the main file
    (or any included file) fails to load, factory_defaults.yaml is used.

    Example:
        manager = ConfigManager()
        config = manager.load()
        config.debounce_ms        # 200.0

        # Raw merged dict
        manager.data["timing"]
    """

    def __init__(
        self,
        config_path: Union[str, Path] = DEFAULT_CONFIG_PATH,
        defaults_path: Union[str, Path] = DEFAULT_FACTORY_PATH,
    ):
        """
        Args:
            config_path: Path to main editor.yaml
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.config: EditorConfig = _DEFAULTS

    def load(self) -> EditorConfig:
        """
        Load YAML configuration

        Process:
        1. Load main editor.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat it as a monolithic config
        4. Fall back to factory defaults on failure
        5. Parse into EditorConfig
        """
        try:
            main_config = self._read_yaml(self.config_path)

            if "include" in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config["include"], self.config_path.parent)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except Exception as ex:
            log.error("Failed to load editor config", path=str(self.config_path),
                      error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.factory_defaults_path)

        self.config = self.parse(self.data)
        return self.config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: Filenames to load (e.g., ["timing.yaml", "compiler.yaml"])
            config_dir: Directory containing config files
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            file_data = self._read_yaml(config_dir / filename)
            if file_data:
                merged.update(file_data)
                log.debug(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    # ===== Parsing =====

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> EditorConfig:
        """
        Build an EditorConfig from a merged config dict.

        Missing sections use defaults; invalid values are replaced by their
        default with a warning.
        """
        timing = data.get("timing") or {}
        compiler = data.get("compiler") or {}
        logging_cfg = data.get("logging") or {}

        return EditorConfig(
            debounce_ms=cls._value(timing, "debounce_ms", _DEFAULTS.debounce_ms, _non_negative),
            grace_ms=cls._value(timing, "grace_ms", _DEFAULTS.grace_ms, _non_negative),
            decompile_delay_ms=cls._value(timing, "decompile_delay_ms", _DEFAULTS.decompile_delay_ms, _non_negative),
            ignore_programmatic_changes=cls._value(
                compiler, "ignore_programmatic_changes", _DEFAULTS.ignore_programmatic_changes, _boolean),
            step_ids=cls._value(compiler, "step_ids", _DEFAULTS.step_ids, StepIdStrategy),
            start_anchor=cls._value(compiler, "start_anchor", _DEFAULTS.start_anchor, _point),
            log_level=cls._value(logging_cfg, "level", _DEFAULTS.log_level, _log_level),
            log_colors=cls._value(logging_cfg, "colors", _DEFAULTS.log_colors, _boolean),
        )

    @staticmethod
    def _value(section: Dict[str, Any], key: str, default: Any, convert: Callable[[Any], Any]) -> Any:
        if key not in section:
            return default
        try:
            return convert(section[key])
        except (TypeError, ValueError, KeyError) as ex:
            log.warn(f"Invalid config value for {key}, using default",
                     value=repr(section[key]), default=default, error=str(ex))
            return default


def _non_negative(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("expected a number")
    number = float(value)
    if number < 0:
        raise ValueError("must be >= 0")
    return number


def _boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError("expected true/false")
    return value


def _point(value: Any) -> tuple:
    x, y = value
    return (_finite(x), _finite(y))


def _finite(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("expected a number")
    return float(value)


def _log_level(value: Any) -> LogLevel:
    return LogLevel[str(value).upper()]


def load_config(config_path: Optional[Union[str, Path]] = None) -> EditorConfig:
    """Load the packaged config, or the given file"""
    manager = ConfigManager(config_path) if config_path else ConfigManager()
    return manager.load()

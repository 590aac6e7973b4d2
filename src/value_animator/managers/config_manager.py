"""
Config Manager

Main configuration manager with include system support.
Loads YAML files, applies logger settings and initializes the AnimationManager.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Union, TYPE_CHECKING

from pydantic import ValidationError

from value_animator.engine.animator import Animator
from value_animator.errors import ConfigError
from value_animator.models.animator_config import AnimatorConfig
from value_animator.schemas.preset import ConfigFileSchema
from value_animator.utils.logger import get_logger, configure_logger, LogCategory

if TYPE_CHECKING:
    from value_animator.engine.clock import Clock
    from value_animator.managers.animation_manager import AnimationManager
    from value_animator.services.event_bus import EventBus

log = get_logger().for_category(LogCategory.CONFIG)

FACTORY_DEFAULTS_PATH = Path(__file__).parent.parent / "config" / "factory_defaults.yaml"


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads the main YAML file and processes an include: directive to load
    modular YAML files. Falls back to the packaged factory defaults when the
    main file cannot be loaded.

    Example:
        config = ConfigManager("animations.yaml")
        config.load()

        animator = config.create_animator("fade_in")
        names = config.list_presets()
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        defaults_path: Union[str, Path] = FACTORY_DEFAULTS_PATH,
        apply_logging: bool = True
    ):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main YAML file (None = factory defaults only)
            defaults_path: Path to factory defaults fallback
            apply_logging: Apply the logging section to the global logger
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.factory_defaults_path = Path(defaults_path)
        self.apply_logging = apply_logging
        self.data: Dict = {}
        self.used_factory_defaults = False

        # Initialized in load()
        self.animation_manager: 'AnimationManager'

    def load(self) -> Dict:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main file
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on failure
        5. Validate, apply logging and initialize AnimationManager

        Returns:
            Merged config data dict

        Raises:
            ConfigError: Neither the main file nor the factory defaults are usable
        """
        try:
            if self.config_path is None:
                raise FileNotFoundError("no config file given")

            main_config = self._read_yaml(self.config_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                includes = main_config.pop('include') or []
                merged = self._load_with_includes(includes, self.config_path.parent)
                # Keys in the main file win over included ones
                merged.update(main_config)
                self.data = merged
            else:
                log.info("Using monolithic configuration")
                self.data = main_config
            self.used_factory_defaults = False

        except (OSError, yaml.YAMLError, ConfigError) as ex:
            if self.config_path is not None:
                log.error(f"Failed to load {self.config_path}", error=str(ex), error_type=type(ex).__name__)
                log.warn("Falling back to factory defaults")
            try:
                self.data = self._read_yaml(self.factory_defaults_path)
            except (OSError, yaml.YAMLError, ConfigError) as defaults_ex:
                raise ConfigError(
                    "Factory defaults could not be loaded",
                    details={"path": str(self.factory_defaults_path), "error": str(defaults_ex)}
                ) from defaults_ex
            self.used_factory_defaults = True

        self._initialize()
        return self.data

    def _read_yaml(self, path: Path) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} must contain a mapping", details={"path": str(path)})
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["logging.yaml", "fades.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict ('animations' maps are merged key by key)
        """
        merged: Dict = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise

            animations = file_data.pop('animations', None)
            merged.update(file_data)
            if animations:
                merged.setdefault('animations', {}).update(animations)
            log.info(f"Loaded {filename}", keys=str(list(file_data.keys()) + (['animations'] if animations else [])))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    def _initialize(self):
        from value_animator.managers.animation_manager import AnimationManager

        try:
            parsed = ConfigFileSchema.model_validate(self.data)
        except ValidationError as ex:
            raise ConfigError("Invalid configuration", details={"errors": ex.errors()}) from ex

        if self.apply_logging:
            configure_logger(parsed.logging.log_level, parsed.logging.colors)

        self.animation_manager = AnimationManager({'animations': parsed.animations})

    # ===== Presets =====

    def list_presets(self) -> List[str]:
        return self.animation_manager.get_all_presets()

    def get_preset(self, name: str) -> AnimatorConfig:
        """AnimatorConfig for a named preset (ConfigError if unknown)"""
        return self.animation_manager.build_config(name)

    def create_animator(
        self,
        name: str,
        event_bus: Optional['EventBus'] = None,
        clock: Optional['Clock'] = None
    ) -> Animator:
        return Animator.from_config(self.get_preset(name), event_bus=event_bus, clock=clock)

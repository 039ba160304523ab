"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds the effect descriptors and runtime
settings from them.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.effect_descriptor import EffectDescriptor
from models.runtime_settings import RuntimeSettings
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes include: directive to load modular YAML files.
    Descriptors come from the `effects:` list, runtime knobs from `runtime:`.

    Example:
        config = ConfigManager()
        config.load()

        config.runtime.fps                             # 60
        config.get_descriptor("text-cursor").defaults  # {"text": "⚛️", ...}
        config.enabled_descriptors()                   # filtered by runtime.components
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative to src/, or absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.used_fallback = False

        self._descriptors: Dict[str, EffectDescriptor] = {}
        self._runtime = RuntimeSettings()

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults.yaml on failure
        5. Build descriptors and runtime settings

        Returns:
            Merged config data dict
        """
        src_dir = Path(__file__).parent.parent
        try:
            full_path = src_dir / self.config_path

            with open(full_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if "include" in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config["include"], full_path.parent)
                for key, value in main_config.items():
                    if key != "include":
                        self.data[key] = value
            else:
                log.info("Using monolithic configuration")
                self.data = main_config
            self.used_fallback = False

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            defaults_path = src_dir / self.factory_defaults_path
            with open(defaults_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}
            self.used_fallback = True

        self._build()
        return self.data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        List values under the same key are concatenated so effects can be
        split over several files; everything else is replaced.

        Args:
            include_list: List of filenames to load (e.g., ["effects.yaml", "runtime.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    file_data = yaml.safe_load(f)
                if file_data:
                    for key, value in file_data.items():
                        if isinstance(value, list) and isinstance(merged.get(key), list):
                            merged[key] = merged[key] + value
                        else:
                            merged[key] = value
                    log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        return merged

    def _build(self) -> None:
        """Validate descriptors one by one; invalid entries are logged and skipped"""
        self._descriptors = {}
        for raw in self.data.get("effects", []) or []:
            name = raw.get("name", "?") if isinstance(raw, dict) else "?"
            try:
                descriptor = EffectDescriptor.model_validate(raw)
            except ValidationError as ex:
                log.error(f"Invalid effect descriptor '{name}'", errors=ex.error_count(), error=str(ex))
                continue
            if descriptor.name in self._descriptors:
                log.warn(f"Duplicate effect descriptor '{descriptor.name}' replaced")
            self._descriptors[descriptor.name] = descriptor

        try:
            self._runtime = RuntimeSettings.model_validate(self.data.get("runtime") or {})
        except ValidationError as ex:
            log.error("Invalid runtime settings, using defaults", error=str(ex))
            self._runtime = RuntimeSettings()

        log.info("Configuration ready", effects=len(self._descriptors), fallback=self.used_fallback)

    # === Accessors ===

    @property
    def runtime(self) -> RuntimeSettings:
        return self._runtime

    @property
    def descriptors(self) -> List[EffectDescriptor]:
        return list(self._descriptors.values())

    def get_descriptor(self, name: str) -> Optional[EffectDescriptor]:
        return self._descriptors.get(name)

    def enabled_descriptors(self) -> List[EffectDescriptor]:
        """Descriptors listed in runtime.components (all when unset), in config order"""
        enabled = self._runtime.components
        if enabled is None:
            return self.descriptors
        unknown = [name for name in enabled if name not in self._descriptors]
        if unknown:
            log.warn("Unknown components in runtime.components", names=", ".join(unknown))
        return [d for d in self.descriptors if d.name in enabled]

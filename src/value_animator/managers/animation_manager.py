"""
Animation Manager - Provides access to animation presets

Parses the 'animations' section of the merged config into validated presets.
Invalid or disabled presets are skipped with a warning.
"""

from typing import Dict, List

from pydantic import ValidationError

from value_animator.errors import ConfigError
from value_animator.models.animator_config import AnimatorConfig
from value_animator.models.easing import get_easing
from value_animator.schemas.preset import AnimationPresetSchema
from value_animator.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


class AnimationManager:
    """
    Animation preset manager

    Responsibilities:
    - Parse preset definitions from config
    - Build AnimatorConfig instances on demand
    """

    def __init__(self, data: dict):
        """
        Initialize with parsed config

        Args:
            data: Dict with 'animations' key (map format)
                  {
                      'fade_in': {
                          'start_value': 0,
                          'end_value': 1,
                          'duration': 500,
                          'easing': 'ease_out_quad'
                      },
                      ...
                  }
        """
        self.presets: Dict[str, AnimationPresetSchema] = {}
        self._process_data(data)

    def _process_data(self, data: dict):
        animations_map = data.get('animations') or {}

        for name, preset_data in animations_map.items():
            if not isinstance(preset_data, dict):
                log.warn(f"Preset '{name}' is not a mapping, skipping")
                continue

            # Skip disabled presets
            if not preset_data.get('enabled', True):
                log.debug(f"Preset '{name}' disabled")
                continue

            try:
                self.presets[name] = AnimationPresetSchema.model_validate(preset_data)
            except ValidationError as ex:
                log.warn(f"Invalid preset '{name}', skipping", errors=ex.error_count(), detail=str(ex.errors()[0]['msg']))

        log.info(f"AnimationManager: {len(self.presets)} presets available")

    def get_preset(self, name: str) -> AnimationPresetSchema:
        try:
            return self.presets[name]
        except KeyError:
            raise ConfigError(
                f"Animation preset '{name}' not found",
                details={"preset": name, "available": list(self.presets)}
            ) from None

    def get_all_presets(self) -> List[str]:
        return list(self.presets)

    def build_config(self, name: str) -> AnimatorConfig:
        """Build an AnimatorConfig for a named preset"""
        preset = self.get_preset(name)
        return AnimatorConfig.create(
            start_value=preset.start_value,
            end_value=preset.end_value,
            duration=preset.duration,
            delta=get_easing(preset.easing),
            fps=preset.fps,
            enable_start_value_frame=preset.enable_start_value_frame,
            enable_end_value_frame=preset.enable_end_value_frame,
        )

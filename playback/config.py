"""Playback configuration for timed auto-advance

The autoplay timer fires every ``base_interval_ms / speed`` milliseconds,
with speed clamped to [min_speed, max_speed].
"""

import os
from dataclasses import dataclass


@dataclass
class PlaybackConfig:
    """Configuration for the playback state machine.

    Attributes:
        base_interval_ms: Tick interval at speed 1.0
        min_speed: Slowest allowed speed multiplier
        max_speed: Fastest allowed speed multiplier
        default_speed: Speed a new session starts with
    """

    base_interval_ms: float = 1000.0
    min_speed: float = 0.25
    max_speed: float = 4.0
    default_speed: float = 1.0

    def clamp_speed(self, speed: float) -> float:
        """Clamp a speed multiplier into the allowed range."""
        return min(self.max_speed, max(self.min_speed, float(speed)))

    def interval_seconds(self, speed: float) -> float:
        """Tick interval in seconds for a speed multiplier."""
        return self.base_interval_ms / self.clamp_speed(speed) / 1000.0

    @classmethod
    def from_env(cls) -> "PlaybackConfig":
        """Read overrides from VISUALIZER_BASE_INTERVAL_MS / VISUALIZER_DEFAULT_SPEED."""
        config = cls()
        base_interval = os.getenv("VISUALIZER_BASE_INTERVAL_MS")
        if base_interval:
            config.base_interval_ms = float(base_interval)
        default_speed = os.getenv("VISUALIZER_DEFAULT_SPEED")
        if default_speed:
            config.default_speed = config.clamp_speed(float(default_speed))
        return config


def configure_playback(
    base_interval_ms: float = 1000.0,
    min_speed: float = 0.25,
    max_speed: float = 4.0,
    default_speed: float = 1.0,
    **kwargs,
) -> PlaybackConfig:
    """Build a PlaybackConfig.

    Args:
        base_interval_ms: Tick interval at speed 1.0 (default: 1000)
        min_speed: Slowest speed multiplier (default: 0.25)
        max_speed: Fastest speed multiplier (default: 4.0)
        default_speed: Initial speed, clamped into range (default: 1.0)
        **kwargs: Additional parameters (ignored for forward compatibility)

    Raises:
        ValueError: If the speed range or interval is not positive
    """
    if base_interval_ms <= 0:
        raise ValueError(f"base_interval_ms must be positive, got {base_interval_ms}")
    if not 0 < min_speed <= max_speed:
        raise ValueError(f"Invalid speed range [{min_speed}, {max_speed}]")

    config = PlaybackConfig(
        base_interval_ms=base_interval_ms,
        min_speed=min_speed,
        max_speed=max_speed,
    )
    config.default_speed = config.clamp_speed(default_speed)
    return config

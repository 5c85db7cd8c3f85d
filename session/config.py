"""
Session Configuration Handler

Manages the YAML configuration file for session settings.
Provides defaults from config/settings.py and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from capture.constants import Facing, VideoHints
from config.settings import (
    AUDIO_ENABLED,
    DEFAULT_FACING,
    RECORDING_BUDGET_MS,
    SESSION_CONFIG_PATH,
    STREAM_ACQUIRE_TIMEOUT_SECONDS,
    TICK_INTERVAL_SECONDS,
    VIDEO_FPS,
    VIDEO_IDEAL_HEIGHT,
    VIDEO_IDEAL_WIDTH,
)


class SessionConfig:
    """
    Session configuration with YAML file support.

    Reads from config/session.yaml if it exists,
    otherwise uses defaults from settings.py.

    Usage:
        config = SessionConfig()
        budget = config.budget_ms
        hints = config.video_hints
    """

    # Default config file location
    DEFAULT_CONFIG_PATH = Path(SESSION_CONFIG_PATH)

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
        create_if_missing: bool = True,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
            overrides: Values applied on top of file and defaults
            create_if_missing: Write a default file when none exists
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self._create_if_missing = create_if_missing
        self._overrides = dict(overrides or {})

        # Load configuration (defaults + file + overrides)
        self._config = self._load_config()

        self.logger.info(f"Session config loaded from {self.config_path}")

    @classmethod
    def defaults(cls, **overrides: Any) -> "SessionConfig":
        """
        Configuration from settings only, without touching the disk.

        Example:
            config = SessionConfig.defaults(budget_ms=5000)
        """
        instance = cls.__new__(cls)
        instance.logger = logging.getLogger(__name__)
        instance.config_path = None
        instance._create_if_missing = False
        instance._overrides = dict(overrides)
        config = instance._get_defaults()
        config.update(instance._overrides)
        instance._validate_config(config)
        instance._config = config
        return instance

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values from settings"""
        return {
            # Budget and timing
            "budget_ms": RECORDING_BUDGET_MS,
            "tick_interval_seconds": TICK_INTERVAL_SECONDS,
            "stream_timeout_seconds": STREAM_ACQUIRE_TIMEOUT_SECONDS,
            # Camera
            "default_facing": DEFAULT_FACING,
            "video_width": VIDEO_IDEAL_WIDTH,
            "video_height": VIDEO_IDEAL_HEIGHT,
            "video_fps": VIDEO_FPS,
            "audio_enabled": AUDIO_ENABLED,
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        # Start with defaults
        config = self._get_defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    file_config = yaml.safe_load(f) or {}

                # File overrides defaults
                config.update(file_config)

                self.logger.info(f"Loaded config from {self.config_path}")

            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults.",
                )
        elif self._create_if_missing:
            self.logger.info(
                f"Config file not found at {self.config_path}. "
                f"Using defaults. Creating default config file...",
            )
            self._save_config(config)

        config.update(self._overrides)

        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values"""
        if int(config["budget_ms"]) <= 0:
            raise ValueError("budget_ms must be positive")

        if float(config["tick_interval_seconds"]) <= 0:
            raise ValueError("tick_interval_seconds must be positive")

        if float(config["stream_timeout_seconds"]) <= 0:
            raise ValueError("stream_timeout_seconds must be positive")

        # Raises ValueError on unknown names
        Facing.parse(str(config["default_facing"]))

        for key in ("video_width", "video_height", "video_fps"):
            if int(config[key]) <= 0:
                raise ValueError(f"{key} must be positive")

        if float(config["tick_interval_seconds"]) * 1000 > int(config["budget_ms"]):
            self.logger.warning(
                "tick_interval_seconds is longer than the whole budget. "
                "Auto-stop will be coarse.",
            )

    def _save_config(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Save configuration to YAML file"""
        if config is None:
            config = self._config

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, "w") as f:
                yaml.dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2,
                )

            self.logger.info(f"Config saved to {self.config_path}")

        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================

    @property
    def budget_ms(self) -> int:
        """Cumulative recording budget"""
        return int(self._config["budget_ms"])

    @property
    def tick_interval_seconds(self) -> float:
        """Elapsed-time tick period while recording"""
        return float(self._config["tick_interval_seconds"])

    @property
    def stream_timeout_seconds(self) -> float:
        """Bound on waiting for a stream to become ready"""
        return float(self._config["stream_timeout_seconds"])

    @property
    def default_facing(self) -> Facing:
        """Camera requested at startup"""
        return Facing.parse(str(self._config["default_facing"]))

    @property
    def video_hints(self) -> VideoHints:
        """Primary acquisition constraints"""
        return VideoHints(
            width=int(self._config["video_width"]),
            height=int(self._config["video_height"]),
            fps=int(self._config["video_fps"]),
        )

    @property
    def audio_enabled(self) -> bool:
        return bool(self._config["audio_enabled"])

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key
            value: New value
            save: If True, save to file immediately
        """
        candidate = dict(self._config)
        candidate[key] = value
        self._validate_config(candidate)
        self._config = candidate

        if save and self.config_path is not None:
            self._save_config()

    def reload(self) -> None:
        """Reload configuration from file"""
        if self.config_path is None:
            return
        self._config = self._load_config()
        self.logger.info("Configuration reloaded")

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary"""
        return self._config.copy()

    def __repr__(self) -> str:
        return f"SessionConfig(path={self.config_path})"

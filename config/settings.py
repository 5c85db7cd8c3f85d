"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (API keys, credentials) should be in .env, NOT here
- Import these settings in modules: from config.settings import RECORDING_BUDGET_MS
- Per-deployment overrides go in .env or config/session.yaml
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# RECORDING BUDGET CONFIGURATION
# =============================================================================

# Cumulative recording budget for one session (milliseconds)
RECORDING_BUDGET_MS = int(os.getenv("RECORDING_BUDGET_MS", "60000"))  # 60 s

# How often the elapsed-time tick runs while recording (seconds)
TICK_INTERVAL_SECONDS = float(os.getenv("TICK_INTERVAL_SECONDS", "0.1"))

# Maximum wait for a stream to become ready before failing (seconds)
STREAM_ACQUIRE_TIMEOUT_SECONDS = float(
    os.getenv("STREAM_ACQUIRE_TIMEOUT_SECONDS", "5.0"),
)

# =============================================================================
# CAMERA CONFIGURATION
# =============================================================================

# Camera requested at startup: "front" (user) or "back" (environment)
DEFAULT_FACING = os.getenv("DEFAULT_FACING", "back")

# Device nodes for each facing direction
FRONT_CAMERA_DEVICE = os.getenv("FRONT_CAMERA_DEVICE", "/dev/video0")
BACK_CAMERA_DEVICE = os.getenv("BACK_CAMERA_DEVICE", "/dev/video2")

# Ideal capture size, used as the primary acquisition constraints
VIDEO_IDEAL_WIDTH = 1920
VIDEO_IDEAL_HEIGHT = 1080
VIDEO_FPS = 30

# Capture audio alongside video
AUDIO_ENABLED = os.getenv("AUDIO_ENABLED", "true").lower() in ("1", "true", "yes")

# =============================================================================
# ENCODER CONFIGURATION
# =============================================================================

VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"  # FFmpeg encoding preset
VIDEO_CRF = 23  # Constant Rate Factor (quality)
SEGMENT_MIME_TYPE = "video/mp4"

# Audio input (PulseAudio default source)
AUDIO_INPUT_DEVICE = "default"
AUDIO_INPUT_FORMAT = "pulse"
AUDIO_CHANNELS = 1
AUDIO_SAMPLE_RATE = 44100
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "128k"

# Time FFmpeg gets to open the device before we check it is still alive
ENCODER_WARMUP_TIME = 0.5  # seconds

# Time FFmpeg gets to flush and exit after SIGTERM
ENCODER_STOP_TIMEOUT = 5.0  # seconds

# =============================================================================
# MONITORING CONFIGURATION
# =============================================================================

# Logging Configuration
LOG_DIR = os.getenv("LOG_DIR", "/var/log/segment-recorder")
LOG_SERVICE_FILE = "service.log"

# Session YAML overrides
SESSION_CONFIG_PATH = os.getenv("SESSION_CONFIG_PATH", "config/session.yaml")

"""
Capture Constants

Enums, constraint types and FFmpeg command construction for the capture
layer. Tunable values live in config/settings.py; this file holds the types
and helpers built on them.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from config.settings import (
    AUDIO_BITRATE,
    AUDIO_CHANNELS,
    AUDIO_CODEC,
    AUDIO_INPUT_DEVICE,
    AUDIO_INPUT_FORMAT,
    AUDIO_SAMPLE_RATE,
    BACK_CAMERA_DEVICE,
    FRONT_CAMERA_DEVICE,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_FPS,
    VIDEO_IDEAL_HEIGHT,
    VIDEO_IDEAL_WIDTH,
    VIDEO_PRESET,
)

# =============================================================================
# CAMERA FACING
# =============================================================================


class Facing(Enum):
    """
    Which physical camera is requested.

    FRONT faces the user, BACK faces the environment.
    """

    FRONT = "front"
    BACK = "back"

    def opposite(self) -> "Facing":
        """The other camera"""
        return Facing.BACK if self is Facing.FRONT else Facing.FRONT

    @classmethod
    def parse(cls, value: str) -> "Facing":
        """
        Parse a facing name, accepting the browser aliases too.

        Example:
            Facing.parse("environment") -> Facing.BACK
        """
        aliases = {"user": "front", "environment": "back"}
        normalized = aliases.get(value.strip().lower(), value.strip().lower())
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown camera facing: {value!r}") from None


# =============================================================================
# ACQUISITION CONSTRAINTS
# =============================================================================


@dataclass(frozen=True)
class VideoHints:
    """
    Ideal video parameters requested from a stream provider.

    Providers treat these as the primary constraint tier. Passing None
    instead of hints means "any format the device offers".
    """

    width: int = VIDEO_IDEAL_WIDTH
    height: int = VIDEO_IDEAL_HEIGHT
    fps: int = VIDEO_FPS

    @property
    def resolution(self) -> str:
        """Resolution as WIDTHxHEIGHT"""
        return f"{self.width}x{self.height}"


DEFAULT_VIDEO_HINTS = VideoHints()

# Video input format (Video4Linux2)
VIDEO_INPUT_FORMAT = "v4l2"

# FFmpeg log level, errors only
FFMPEG_LOG_LEVEL = "error"

# Input queue depth for camera and microphone
THREAD_QUEUE_SIZE = 512


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def device_for_facing(facing: Facing) -> str:
    """
    Map a facing direction to its configured device node.

    Example:
        device_for_facing(Facing.FRONT) -> "/dev/video0"
    """
    if facing is Facing.FRONT:
        return FRONT_CAMERA_DEVICE
    return BACK_CAMERA_DEVICE


def validate_camera_device(device_path: str) -> bool:
    """
    Check if camera device exists and is a character device.

    Example:
        if validate_camera_device("/dev/video0"):
            print("Camera found!")
    """
    device = Path(device_path)
    return device.exists() and device.is_char_device()


def get_ffmpeg_command(
    input_device: str,
    hints: Optional[VideoHints] = None,
    audio_enabled: bool = True,
    output: str = "pipe:1",
) -> list[str]:
    """
    Generate FFmpeg command for encoding one segment.

    The encoded stream is written as fragmented MP4 to `output` (stdout by
    default) so the segment stays in memory.

    Args:
        input_device: Camera device path (e.g., /dev/video0)
        hints: Requested size/fps, or None to take the device default
        audio_enabled: Also capture the default PulseAudio source
        output: FFmpeg output target

    Returns:
        List of command arguments for subprocess

    Example:
        cmd = get_ffmpeg_command("/dev/video0", VideoHints())
        subprocess.Popen(cmd, stdout=subprocess.PIPE)
    """
    command = [
        "ffmpeg",
        "-f",
        VIDEO_INPUT_FORMAT,
        "-input_format",
        "mjpeg",
    ]

    if hints is not None:
        command.extend(
            [
                "-video_size",
                hints.resolution,
                "-framerate",
                str(hints.fps),
            ],
        )

    command.extend(
        [
            "-thread_queue_size",
            str(THREAD_QUEUE_SIZE),
            "-i",
            input_device,
        ],
    )

    if audio_enabled:
        command.extend(
            [
                "-f",
                AUDIO_INPUT_FORMAT,
                "-ac",
                str(AUDIO_CHANNELS),
                "-ar",
                str(AUDIO_SAMPLE_RATE),
                "-thread_queue_size",
                str(THREAD_QUEUE_SIZE),
                "-i",
                AUDIO_INPUT_DEVICE,
            ],
        )

    command.extend(
        [
            "-c:v",
            VIDEO_CODEC,
            "-preset",
            VIDEO_PRESET,
            "-crf",
            str(VIDEO_CRF),
            "-pix_fmt",
            "yuv420p",
        ],
    )

    if audio_enabled:
        command.extend(
            [
                "-c:a",
                AUDIO_CODEC,
                "-b:a",
                AUDIO_BITRATE,
            ],
        )

    command.extend(
        [
            # Fragmented MP4 stays valid when stopped with SIGTERM and
            # can be written to a non-seekable pipe
            "-movflags",
            "+frag_keyframe+empty_moov",
            "-f",
            "mp4",
            "-loglevel",
            FFMPEG_LOG_LEVEL,
            "-y",
            output,
        ],
    )

    return command

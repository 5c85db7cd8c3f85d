"""
Capture Factory and Constants Tests

To run:
    pytest tests/capture/test_capture_factory.py -v
"""

import pytest

from capture.constants import (
    Facing,
    VideoHints,
    device_for_facing,
    get_ffmpeg_command,
)
from capture.factory import CaptureFactory, create_capture_backends
from capture.implementations.mock_segment_encoder import MockSegmentEncoder
from capture.implementations.mock_stream_provider import MockStreamProvider
from capture.implementations.v4l2_stream_provider import V4L2StreamProvider
from capture.interfaces.stream_provider_interface import DeviceNotFoundError

# =============================================================================
# FACTORY TESTS
# =============================================================================


@pytest.mark.unit
def test_factory_mock_mode():
    """Test forced mock creation."""
    assert isinstance(CaptureFactory.create_stream_provider(mode="mock"), MockStreamProvider)
    assert isinstance(CaptureFactory.create_segment_encoder(mode="mock"), MockSegmentEncoder)


@pytest.mark.unit
def test_create_capture_backends_force_mock():
    """Test the convenience function returns a matching mock pair."""
    provider, encoder = create_capture_backends(force_mock=True)

    assert isinstance(provider, MockStreamProvider)
    assert isinstance(encoder, MockSegmentEncoder)


@pytest.mark.unit
def test_real_capture_availability_keys():
    """Test availability report shape."""
    availability = CaptureFactory.is_real_capture_available()

    assert set(availability) == {"ffmpeg", "camera"}


# =============================================================================
# V4L2 PROVIDER TESTS
# =============================================================================


@pytest.mark.unit
def test_v4l2_missing_device(tmp_path):
    """Test a missing device node is reported as not found."""
    missing = str(tmp_path / "video9")
    provider = V4L2StreamProvider(devices={Facing.BACK: missing, Facing.FRONT: missing})

    assert provider.is_available() is False
    with pytest.raises(DeviceNotFoundError):
        provider.acquire(Facing.BACK)


# =============================================================================
# CONSTANTS TESTS
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("front", Facing.FRONT),
        ("BACK", Facing.BACK),
        ("user", Facing.FRONT),
        ("environment", Facing.BACK),
    ],
)
def test_facing_parse(text, expected):
    """Test facing names and aliases."""
    assert Facing.parse(text) == expected


@pytest.mark.unit
def test_facing_parse_unknown():
    with pytest.raises(ValueError):
        Facing.parse("sideways")


@pytest.mark.unit
def test_facing_opposite():
    assert Facing.FRONT.opposite() == Facing.BACK
    assert Facing.BACK.opposite() == Facing.FRONT


@pytest.mark.unit
def test_device_for_facing():
    assert device_for_facing(Facing.FRONT) == "/dev/video0"
    assert device_for_facing(Facing.BACK) == "/dev/video2"


@pytest.mark.unit
def test_ffmpeg_command_with_hints():
    """Test constrained command requests size and rate."""
    command = get_ffmpeg_command("/dev/video0", VideoHints(1280, 720, 30))

    assert command[0] == "ffmpeg"
    assert "1280x720" in command
    assert command[command.index("-framerate") + 1] == "30"
    assert "-c:a" in command
    assert command[-1] == "pipe:1"


@pytest.mark.unit
def test_ffmpeg_command_unconstrained_without_audio():
    """Test fallback command leaves size to the device."""
    command = get_ffmpeg_command("/dev/video0", None, audio_enabled=False)

    assert "-video_size" not in command
    assert "-framerate" not in command
    assert "pulse" not in command
    assert "-c:a" not in command
    assert "+frag_keyframe+empty_moov" in command

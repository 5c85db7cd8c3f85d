"""
FFmpeg Segment Encoder Implementation

Real segment encoder using an FFmpeg subprocess.
Encodes the stream's camera (and microphone) to fragmented MP4 on stdout
and collects it in memory; one subprocess per segment.
"""

import logging
import shutil
import subprocess
import threading
import time
from typing import Dict

from capture.constants import get_ffmpeg_command
from capture.interfaces.segment_encoder_interface import (
    EncodedPayload,
    EncoderError,
    EncoderHandle,
    EncoderInitError,
    SegmentEncoderInterface,
)
from capture.interfaces.stream_provider_interface import StreamHandle
from config.settings import (
    ENCODER_STOP_TIMEOUT,
    ENCODER_WARMUP_TIME,
    SEGMENT_MIME_TYPE,
)


class _EncodingProcess:
    """FFmpeg process plus the thread draining its stdout"""

    def __init__(self, process: subprocess.Popen):
        self.process = process
        self.buffer = bytearray()
        self.started_at = time.monotonic()
        self.reader = threading.Thread(
            target=self._drain,
            daemon=True,
            name="FFmpegSegmentReader",
        )
        self.reader.start()

    def _drain(self) -> None:
        # stdout must be read continuously or FFmpeg blocks on a full pipe
        stream = self.process.stdout
        for chunk in iter(lambda: stream.read(65536), b""):
            self.buffer.extend(chunk)


class FFmpegSegmentEncoder(SegmentEncoderInterface):
    """
    Segment encoder using FFmpeg.

    Usage:
        encoder = FFmpegSegmentEncoder()
        handle = encoder.begin(stream)
        # ... recording happens in background ...
        payload = encoder.finish(handle)
    """

    def __init__(
        self,
        warmup_time: float = ENCODER_WARMUP_TIME,
        stop_timeout: float = ENCODER_STOP_TIMEOUT,
    ):
        self.logger = logging.getLogger(__name__)
        self.warmup_time = warmup_time
        self.stop_timeout = stop_timeout
        self._running: Dict[int, EncoderHandle] = {}

        self.logger.info("FFmpeg Segment Encoder initialized")

    def begin(self, stream: StreamHandle) -> EncoderHandle:
        """
        Launch FFmpeg against the stream's device.

        Raises:
            EncoderInitError: FFmpeg missing or exited during warmup
        """
        if not stream.active:
            raise EncoderInitError(f"Stream {stream.stream_id} is not active")

        command = get_ffmpeg_command(
            input_device=stream.device,
            hints=stream.hints,
            audio_enabled=stream.audio_enabled,
        )
        self.logger.debug(f"FFmpeg command: {' '.join(command)}")

        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            raise EncoderInitError(
                "FFmpeg not found. Install with: sudo apt-get install ffmpeg",
            ) from None
        except OSError as e:
            raise EncoderInitError(f"Failed to launch FFmpeg: {e}") from e

        encoding = _EncodingProcess(process)

        time.sleep(self.warmup_time)

        if process.poll() is not None:
            stderr = process.stderr.read().decode("utf-8", errors="ignore")
            encoding.reader.join(timeout=1.0)
            raise EncoderInitError(f"FFmpeg failed to start: {stderr.strip()}")

        handle = EncoderHandle(stream=stream, resource=encoding)
        self._running[handle.encoder_id] = handle

        self.logger.info(
            f"Encoder {handle.encoder_id} started "
            f"(PID: {process.pid}, device: {stream.device})",
        )
        return handle

    def finish(self, handle: EncoderHandle) -> EncodedPayload:
        """
        Stop FFmpeg with SIGTERM and collect the encoded bytes.

        Falls back to SIGKILL after stop_timeout; the payload gathered so far
        is still returned since fragmented MP4 is valid up to the last
        complete fragment.
        """
        if handle.finished or self._running.pop(handle.encoder_id, None) is None:
            raise EncoderError(f"Encoder {handle.encoder_id} already finished")

        handle.finished = True
        encoding: _EncodingProcess = handle.resource
        process = encoding.process
        elapsed_ms = int((time.monotonic() - encoding.started_at) * 1000)

        process.terminate()
        try:
            process.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            self.logger.warning("FFmpeg didn't stop gracefully, force killing")
            process.kill()
            process.wait()

        encoding.reader.join(timeout=self.stop_timeout)
        stderr = process.stderr.read().decode("utf-8", errors="ignore")

        if not encoding.buffer:
            raise EncoderError(
                f"FFmpeg produced no output (exit {process.returncode}): "
                f"{stderr.strip()}",
            )

        if process.returncode not in (0, 255, -15):
            self.logger.warning(
                f"FFmpeg exited with code {process.returncode}: {stderr.strip()}",
            )

        self.logger.info(
            f"Encoder {handle.encoder_id} finished "
            f"({len(encoding.buffer) / 1024:.1f} KB, {elapsed_ms} ms)",
        )
        return EncodedPayload(
            data=bytes(encoding.buffer),
            mime_type=SEGMENT_MIME_TYPE,
            reported_duration_ms=elapsed_ms,
        )

    def abort(self, handle: EncoderHandle) -> None:
        """Kill FFmpeg and drop whatever it produced"""
        if self._running.pop(handle.encoder_id, None) is None:
            return

        handle.finished = True
        encoding: _EncodingProcess = handle.resource
        try:
            encoding.process.kill()
            encoding.process.wait(timeout=1.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            self.logger.error(f"Error aborting encoder {handle.encoder_id}: {e}")

        self.logger.info(f"Encoder {handle.encoder_id} aborted")

    def is_available(self) -> bool:
        """Check if FFmpeg is installed"""
        if not shutil.which("ffmpeg"):
            self.logger.warning("FFmpeg not found in PATH")
            return False
        return True

    def cleanup(self) -> None:
        """Abort any running encoder"""
        self.logger.info("Cleaning up FFmpeg Segment Encoder")
        for handle in list(self._running.values()):
            self.abort(handle)

"""
Permission Constants

Platform enum and the onboarding text shown per platform.
"""

from enum import Enum
from typing import Dict, List


class Platform(Enum):
    """Platform family the recorder is running on"""

    IOS = "ios"
    ANDROID = "android"
    DESKTOP = "desktop"


# Runtime permissions a mobile build must hold before opening the camera
ANDROID_REQUIRED_PERMISSIONS = (
    "android.permission.CAMERA",
    "android.permission.RECORD_AUDIO",
)

# Device nodes whose access decides microphone permission on Linux
SOUND_DEVICE_DIR = "/dev/snd"

PLATFORM_INSTRUCTIONS: Dict[Platform, List[str]] = {
    Platform.IOS: [
        "When you start recording, iOS will ask for permissions:",
        'Camera Access: tap "OK" to allow camera usage',
        'Microphone Access: tap "OK" to allow audio recording',
        "If you tapped \"Don't Allow\", go to Settings > Privacy & Security > "
        "Camera/Microphone to enable permissions.",
    ],
    Platform.ANDROID: [
        "Grant the following permissions to use the app:",
        "Camera - for recording videos",
        "Microphone - for recording audio",
    ],
    Platform.DESKTOP: [
        "Camera and microphone access is checked before recording starts.",
        "On Linux, add your user to the 'video' and 'audio' groups if access "
        "is refused.",
    ],
}

# Shown when the check fails, per platform
DENIED_MESSAGES: Dict[Platform, str] = {
    Platform.IOS: "Permissions will be requested when the camera starts.",
    Platform.ANDROID: "Please grant camera and microphone permissions to continue.",
    Platform.DESKTOP: "Permissions not granted.",
}

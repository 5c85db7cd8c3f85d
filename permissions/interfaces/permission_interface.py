"""
Permission Interface

Abstract interface for the platform permission collaborator.
The permission gate depends on this abstraction, so tests can run
against MockPermissions without touching device nodes.
"""

from abc import ABC, abstractmethod

from permissions.constants import Platform


class PermissionInterface(ABC):
    """
    Abstract base class for permission checkers.

    Implementations answer whether camera and microphone access is
    currently granted (requesting it where the platform allows) and which
    platform family they run on.
    """

    @abstractmethod
    def check_and_request_permissions(self) -> bool:
        """
        Check camera and microphone access, requesting it if possible.

        Returns:
            True if capture may proceed
        """

    @abstractmethod
    def get_platform(self) -> Platform:
        """Platform family used to choose onboarding instructions"""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this checker can run here"""


class PermissionCheckError(Exception):
    """Permission check could not be performed"""

    pass

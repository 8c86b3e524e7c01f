"""Service layer: login flow, provisioning, progress and course reads."""

from .courses import CourseData, CourseDataAggregator, lesson_to_dict, progress_to_dict
from .google import GoogleIdentityProvider, GoogleProfile
from .identity import IdentityProvisioner
from .oauth import (
    AuthorizationInitiator,
    CallbackValidator,
    OAuthCookies,
    OAuthSession,
)
from .progress import ProgressRecorder

__all__ = [
    "AuthorizationInitiator",
    "CallbackValidator",
    "CourseData",
    "CourseDataAggregator",
    "GoogleIdentityProvider",
    "GoogleProfile",
    "IdentityProvisioner",
    "OAuthCookies",
    "OAuthSession",
    "ProgressRecorder",
    "lesson_to_dict",
    "progress_to_dict",
]

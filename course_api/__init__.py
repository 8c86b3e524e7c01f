"""Video-course backend: Google login, lesson listing and progress tracking."""

__version__ = "0.1.0"

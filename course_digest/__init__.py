# course_digest/__init__.py
"""
course_digest package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; `course_digest.cli` stays the submodule
from course_digest.cli import cli as main_cli  # noqa: E402

__all__ = ["__version__", "main_cli"]

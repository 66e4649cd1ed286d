"""reptier: rep counting and skill tiers from pose landmarks.

This package turns a stream of body-landmark frames from a pose estimator
into a rep count, live form feedback and a skill tier for the exercise.
"""

__all__ = [
    "cli",
    "config",
    "session",
]

__version__ = "0.1.0"

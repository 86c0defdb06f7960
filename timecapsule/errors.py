"""
Exception taxonomy for time capsule operations.

Every error carries a ``user_message`` suitable for showing as-is; the
underlying transport error (if any) is kept on ``__cause__``.
"""

from __future__ import annotations


class TimeCapsuleError(Exception):
    """Base class for all time capsule errors."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class ConfigurationError(TimeCapsuleError):
    """Bad static setup (e.g. no configured years). Fatal at startup."""

    user_message = "Time capsule is misconfigured."


class CredentialError(TimeCapsuleError):
    """No bearer credential, or it has expired."""

    user_message = "Please log in with Spotify first."


class FetchFailure(TimeCapsuleError):
    """Retrieving data from Spotify failed."""

    MESSAGES = {
        "playlists": "There was a problem fetching your playlists. You might be rate-limited by Spotify.",
        "tracks": "There was a problem fetching your playlists. You might be rate-limited by Spotify.",
        "profile": "Failed to load user profile from Spotify.",
        "recommendations": "Failed to load recommendations from Spotify.",
    }

    def __init__(self, stage: str, message: str | None = None):
        self.stage = stage
        super().__init__(message or f"Failed to fetch {stage}")

    @property
    def user_message(self) -> str:
        return self.MESSAGES.get(self.stage, TimeCapsuleError.user_message)


class EmptySelection(TimeCapsuleError):
    """No tracks were added inside the chosen time window."""

    user_message = "No songs found for the selected time frame. Try a different year/season."


class CreateFailure(TimeCapsuleError):
    user_message = "Failed to create playlist."


class AddFailure(TimeCapsuleError):
    user_message = "Could not add songs to your playlist. Try again with a different time frame."


class InvalidTransition(TimeCapsuleError):
    """A playlist session step was attempted out of order."""

    user_message = "That step isn't available yet."

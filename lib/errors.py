"""Exceptions raised by the profile store and translated at the route boundary."""


class ProfileError(Exception):
    """Base class for profile service failures."""


class ProfileValidationError(ProfileError):
    """Update request rejected before any write.

    ``errors`` holds one entry per violated field, in the shape returned to the
    caller under the ``errors`` key.
    """

    def __init__(self, errors: list[dict]):
        super().__init__(f"{len(errors)} invalid field(s)")
        self.errors = errors


class ProfileNotFoundError(ProfileError):
    """No user record exists for the authenticated identity."""

    def __init__(self, user_id: str):
        super().__init__(f"user {user_id!r} not found")
        self.user_id = user_id


class StoreUnavailableError(ProfileError):
    """The database pool has not been initialised."""

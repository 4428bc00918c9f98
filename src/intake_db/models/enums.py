"""Database-level enumerations for stored intake profiles."""

import enum


class ProfileStatus(str, enum.Enum):
    """Lifecycle of a stored profile row.

    Transitions:
        pending -> completed  (completion marker written in the same
                               transaction as the profile)
    """

    PENDING = "pending"
    COMPLETED = "completed"

"""ORM models for intake_db."""

from intake_db.models.base import Base
from intake_db.models.enums import ProfileStatus
from intake_db.models.profile import IntakeProfile

__all__ = ["Base", "ProfileStatus", "IntakeProfile"]

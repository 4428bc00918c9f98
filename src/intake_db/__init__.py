"""intake_db: async PostgreSQL storage for completed intake profiles.

Public API:
    IntakeProfile           : ORM model (one row per user flow)
    ProfileStatus           : pending / completed
    ProfileRepository       : flush-only CRUD on intake_profiles
    DatabaseProfilePersister: ProfilePersister backed by the repository
    get_engine / get_session_factory / dispose_engine: engine lifecycle
"""

from intake_db.engine import dispose_engine, get_engine, get_session_factory
from intake_db.models import Base, IntakeProfile, ProfileStatus
from intake_db.persister import DatabaseProfilePersister
from intake_db.repository import ProfileRepository

__all__ = [
    "Base",
    "IntakeProfile",
    "ProfileStatus",
    "ProfileRepository",
    "DatabaseProfilePersister",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
]

"""intake_flow: wizard flow engine for fitness onboarding.

Public API:
    IntakeFlow          : one user's pass through the onboarding screens
    ScreenCatalog       : validated, ordered screen descriptors (YAML-backed)
    AnswerStore         : cumulative answers for a flow instance
    NavigationController: cursor + bonus-step sub-state machine
    CompletionHandler   : compiles and persists the profile record
    ProfilePersister    : ABC for the external storage collaborator
    can_advance         : per-screen-kind forward-progress gate

Step models:
    ScreenStep   : step: render a catalog screen
    BonusStep    : step: the quick tour shown once before completion
    CompletedStep: step: profile stored, proceed to the next stage
    StepResult   : union of all step types

Errors:
    CatalogError, FlowStateError, FlowLockedError, PersistenceError
"""

from intake_flow.answers import AnswerStore
from intake_flow.catalog import ScreenCatalog
from intake_flow.completion import CompletionHandler
from intake_flow.errors import (
    CatalogError,
    FlowLockedError,
    FlowStateError,
    PersistenceError,
)
from intake_flow.flow import FlowStatus, IntakeFlow
from intake_flow.interfaces import ProfilePersister
from intake_flow.models.profile import ProfileRecord
from intake_flow.models.step import (
    BonusStep,
    CompletedStep,
    FlowInfo,
    ScreenStep,
    StepResult,
)
from intake_flow.navigation import NavigationController, NavOutcome, NavState
from intake_flow.validators import can_advance

__all__ = [
    # Flow & collaborators
    "IntakeFlow",
    "FlowStatus",
    "ScreenCatalog",
    "AnswerStore",
    "NavigationController",
    "NavOutcome",
    "NavState",
    "CompletionHandler",
    "ProfilePersister",
    "can_advance",
    # Data models
    "ProfileRecord",
    "FlowInfo",
    "BonusStep",
    "CompletedStep",
    "ScreenStep",
    "StepResult",
    # Errors
    "CatalogError",
    "FlowLockedError",
    "FlowStateError",
    "PersistenceError",
]

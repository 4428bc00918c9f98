"""Intake flow constants shared across the SDK.

These values are referenced by the catalog, the answer store, and the flow.
They mirror conventions encoded in the YAML catalog under ``v1/``.

A few constants can be overridden via environment variables so that
deployments can relocate the catalog or the post-onboarding stage without
code changes.
"""

import os

# Label shown on the forward button when a screen has no ``button_text``.
DEFAULT_CONTINUE_LABEL = "Continue"

# Reserved answer keys.  Multi-select screens default to the goals
# collection; frequency screens always write to ``frequency``.
GOALS_KEY = "selectedGoals"
FREQUENCY_KEY = "frequency"

# Catalog file relative to the repo root's ``v1/`` directory.
# Overridable via INTAKE_CATALOG_PATH (absolute path to a YAML file).
CATALOG_FILENAME = "screens.yaml"
CATALOG_PATH = os.getenv("INTAKE_CATALOG_PATH") or None

# Application stage the shell is told to proceed to once the profile is saved.
# Overridable via INTAKE_NEXT_STAGE env var.
NEXT_STAGE = os.getenv("INTAKE_NEXT_STAGE", "subscription")

# Human-readable screen kind names for API responses and logging.
KIND_NAMES: dict[str, str] = {
    "informational": "Information",
    "motivational": "Motivation",
    "form": "Form",
    "single_choice": "Single Choice",
    "multi_select": "Multi Select",
    "frequency": "Training Frequency",
    "conclusion": "Conclusion",
}

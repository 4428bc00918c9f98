"""intake_server: FastAPI REST shell for the fitness intake wizard.

Holds live flow instances in memory, exposes step-by-step navigation over
HTTP, and stores completed profiles through ``intake_db``.
"""

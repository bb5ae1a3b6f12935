"""
HQ - Command Center

Tracks progress across projects by scraping markdown checklists out of
their repositories into a single JSON document for the dashboard.
"""

__version__ = "2.1.0"

# Re-export core models for convenience
from hq.core.config.models import HQConfig
from hq.core.store.models import Document, Milestone, Project, TaskNode

__all__ = ["Document", "HQConfig", "Milestone", "Project", "TaskNode", "__version__"]

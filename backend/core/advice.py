"""
Machine-keyed advice messages.

Engine outputs (recommendations, warnings, suggestions) are Advice objects: a
stable dotted ``code`` the presentation layer can localize, an English default
``message`` and the ``params`` used to render it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Advice:
    """A single recommendation, warning or suggestion."""

    code: str  # e.g. "recovery.under_recovered"
    message: str
    params: Dict[str, Any] = field(default_factory=dict)

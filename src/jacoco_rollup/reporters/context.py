"""Presentation settings resolved once per run and handed to reporters."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

_LOCALE_RE = re.compile(r"[A-Za-z]{2,3}(?:[_-][A-Za-z]{2})?")


def format_metric(metric: float | None) -> str:
    """Format a coverage percentage for display (``N/A`` when absent)."""
    if metric is None:
        return "N/A"
    return f"{metric:.2f}%"


def resolve_locale(locales: str) -> str:
    """Return the first valid token of a comma-separated locale list.

    Falls back to ``en`` when the list is empty or holds no valid token.
    """
    for token in locales.split(","):
        candidate = token.strip()
        if not candidate:
            continue
        if _LOCALE_RE.fullmatch(candidate):
            return candidate.replace("_", "-")
        logger.warning("Ignoring invalid locale %r", candidate)
    return DEFAULT_LOCALE


@dataclass(frozen=True)
class RenderContext:
    """Request-scoped rendering configuration."""

    project_name: str
    locale: str = DEFAULT_LOCALE
    output_name: str = "jacoco"
    title: str = "Code Test Coverage"
    include_empty: bool = False

    @property
    def language(self) -> str:
        """Primary language subtag (``en`` for ``en-US``)."""
        return self.locale.split("-", 1)[0].lower()

    @property
    def heading(self) -> str:
        return f"{self.project_name} - Jacoco Aggregated Code Coverage Report"

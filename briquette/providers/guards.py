"""Output guards for generated logistics reports.

These guards enforce the rules the report view relies on:
- the report text is never empty
- stray Markdown code fences around the report are removed
- the expected ``## `` section markers are present (warn only)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from .base import LLMEmptyResponseError

logger = logging.getLogger(__name__)

SECTION_MARKER = "## "


# ---------------------------------------------------------------------------
# Report sections
# ---------------------------------------------------------------------------

@dataclass
class ReportSection:
    """One ``## `` delimited block of a generated report."""

    title: str
    lines: List[str] = field(default_factory=list)

    @property
    def body(self) -> str:
        return "\n".join(self.lines).strip()


def parse_sections(text: str) -> List[ReportSection]:
    """Split report text into sections at ``## `` headings.

    Text before the first heading becomes an untitled section, and is
    dropped when blank.
    """
    sections: List[ReportSection] = []
    current = ReportSection(title="")
    for line in text.splitlines():
        if line.startswith(SECTION_MARKER):
            if current.title or current.body:
                sections.append(current)
            current = ReportSection(title=line[len(SECTION_MARKER):].strip())
        else:
            current.lines.append(line)
    if current.title or current.body:
        sections.append(current)
    return sections


def _heading_key(title: str) -> str:
    """Heading text without emoji / punctuation, lower-cased."""
    return " ".join(
        "".join(ch for ch in title if ch.isalnum() or ch.isspace() or ch == "&").split()
    ).lower()


# ---------------------------------------------------------------------------
# Report Output Guard
# ---------------------------------------------------------------------------

class ReportOutputGuard:
    """Ensure LLM output is a non-empty Markdown report."""

    @staticmethod
    def enforce(raw_text: str, provider: str = "") -> str:
        """Return cleaned report text, or raise if nothing usable came back."""
        text = (raw_text or "").strip()

        # Strip markdown code block wrapper
        if text.startswith("```"):
            first_nl = text.find("\n")
            text = text[first_nl + 1:] if first_nl > 0 else ""
            if text.rstrip().endswith("```"):
                text = text.rstrip()[:-3]
            text = text.strip()

        if not text:
            raise LLMEmptyResponseError(
                "No content generated", raw_text=raw_text or "", provider=provider
            )
        return text

    @staticmethod
    def missing_sections(text: str, expected: Sequence[str]) -> List[str]:
        """Return the expected headings that do not appear in ``text``."""
        found = {_heading_key(s.title) for s in parse_sections(text) if s.title}
        return [h for h in expected if _heading_key(h) not in found]

    @staticmethod
    def check_sections(text: str, expected: Sequence[str]) -> List[str]:
        """Log a warning for missing sections; the report is still usable."""
        missing = ReportOutputGuard.missing_sections(text, expected)
        if missing:
            logger.warning(
                "Generated report is missing %d expected section(s): %s",
                len(missing),
                ", ".join(missing),
            )
        return missing

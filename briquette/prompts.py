"""Prompt templates for the logistics report.

All prompt constants are exposed so the Streamlit UI can show them, and
custom overrides are accepted via the ``overrides`` dict parameter on
:func:`build_report_prompt`.
"""

from typing import Dict, List, Optional, Tuple

from .converter import SQ_FT_PER_BRIQUETTE

# ------------------------------------------------------------------
# Section headings the report view expects
# ------------------------------------------------------------------

EXPECTED_SECTIONS: List[str] = [
    "📋 Project Overview",
    "🚚 Logistics Estimates",
    "⏱️ Application Time",
    "💡 Pro Tips",
]

BRIQUETTE_WEIGHT_OZ = 0.5

# ------------------------------------------------------------------
# System prompt
# ------------------------------------------------------------------

SYSTEM_PROMPT = """\
You are a land management logistics planner.
Keep the tone professional, encouraging, and concise. Do not include conversational filler.
"""

# ------------------------------------------------------------------
# User prompt
# ------------------------------------------------------------------

REPORT_PROMPT_TEMPLATE = """\
I am planning a land management project.
Input Data:
- Area: {acres} acres
- Product: {units_needed} briquettes (standard size, roughly similar to a hockey puck or charcoal briquette).
- Coverage: 1 per {coverage} sq ft.

Please generate a helpful "Logistics & Application Plan" in Markdown format.
Structure the response strictly as follows:

## 📋 Project Overview
[A 1-sentence summary of the scale of this operation, e.g. "Small residential task" vs "Large agricultural operation"].

## 🚚 Logistics Estimates
- **Estimated Total Weight:** [Calculate approx weight assuming {weight_oz} oz per briquette, convert to lbs].
- **Volume Visualization:** [A metaphor for the volume, e.g. "Fits in a backpack" or "Requires a pickup truck bed"].

## ⏱️ Application Time
- **Manual Application:** [Estimated time for one person to walk and drop].
- **Mechanized/Team Application:** [Estimated time if using a spreader or team, if applicable for this scale].

## 💡 Pro Tips
1. [Tip about grid patterns or marking territory].
2. [Tip about storage or handling].
3. [Tip about safety or environmental checking].
"""


def format_acres(acres: float) -> str:
    """``2.0`` → ``"2"``, ``0.5`` → ``"0.5"``."""
    if float(acres).is_integer():
        return str(int(acres))
    return repr(float(acres))


def build_report_prompt(
    acres: float,
    units_needed: int,
    overrides: Optional[Dict[str, str]] = None,
) -> Tuple[str, str]:
    """Return the ``(system_prompt, user_prompt)`` pair for a report.

    ``overrides`` may replace ``"system"`` and/or ``"template"``.  A
    replacement template can use ``{acres}``, ``{units_needed}``,
    ``{coverage}`` and ``{weight_oz}``.
    """
    overrides = overrides or {}
    system_prompt = overrides.get("system", SYSTEM_PROMPT)
    template = overrides.get("template", REPORT_PROMPT_TEMPLATE)
    user_prompt = template.format(
        acres=format_acres(acres),
        units_needed=units_needed,
        coverage=SQ_FT_PER_BRIQUETTE,
        weight_oz=BRIQUETTE_WEIGHT_OZ,
    )
    return system_prompt, user_prompt

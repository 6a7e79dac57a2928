"""
Briquette -- Estimation Utility (Streamlit UI)
==============================================

Enter an acreage, see how many briquettes cover it at one per 100 sq ft,
and optionally ask Gemini for a logistics & application plan.

Run with::

    streamlit run src/app/streamlit_app.py
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path (needed for Streamlit Cloud deployment)
_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import streamlit as st

# ---------------------------------------------------------------------------
# Project imports
# ---------------------------------------------------------------------------

from briquette.converter import SQ_FT_PER_ACRE, SQ_FT_PER_BRIQUETTE
from briquette.providers.audit import AuditLogger
from briquette.providers.guards import parse_sections
from briquette.report import ReportStatus
from briquette.session import EstimatorSession
from src.config.models import load_settings
from src.app.session_factory import build_session, check_provider_available
from src.app.version import version_label

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SESSION_KEY = "estimator_session"
AUDIT_KEY = "report_audit"
INPUT_KEY = "acres_input"


# ---------------------------------------------------------------------------
# Session-state initialisation
# ---------------------------------------------------------------------------

def _get_session() -> EstimatorSession:
    """Return the per-browser-session estimator, creating it on first use."""
    if SESSION_KEY not in st.session_state:
        settings = load_settings()
        st.session_state["settings"] = settings
        audit = AuditLogger()
        st.session_state[AUDIT_KEY] = audit
        st.session_state[SESSION_KEY] = build_session(settings, audit=audit)
    return st.session_state[SESSION_KEY]


def _on_acres_change() -> None:
    _get_session().submit(st.session_state.get(INPUT_KEY, ""))


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

def _render_calculator(session: EstimatorSession) -> None:
    st.subheader("🗺️ Property Details")
    st.text_input(
        "Total Acreage",
        key=INPUT_KEY,
        placeholder="e.g. 0.5",
        on_change=_on_acres_change,
    )
    if session.error:
        st.error(session.error)
    st.caption(f"Automatically calculates based on {SQ_FT_PER_ACRE:,} sq ft per acre.")


def _render_summary(session: EstimatorSession) -> None:
    result = session.result
    if result is None:
        return
    st.metric("Total Required", f"{result.units_needed:,} briquettes")
    c1, c2 = st.columns(2)
    c1.metric("Total Area", f"{result.area_sq_ft:,.0f} sq ft")
    c2.metric("Coverage Rate", f"1 per {SQ_FT_PER_BRIQUETTE} sq ft")


# ---------------------------------------------------------------------------
# Report panel
# ---------------------------------------------------------------------------

def _run_report(session: EstimatorSession, retry: bool = False) -> None:
    result = session.result
    with st.spinner(
        f"Analyzing project scale: {result.units_needed:,} units "
        f"across {result.acres} acres..."
    ):
        if retry:
            asyncio.run(session.retry_report())
        else:
            asyncio.run(session.request_report())
    st.rerun()


def _render_report(session: EstimatorSession) -> None:
    if session.result is None:
        st.info("Enter acreage to begin. Your results and AI insights will appear here.")
        return

    state = session.report_state
    if state.status is ReportStatus.IDLE:
        st.subheader("📦 Ready for Analysis")
        st.markdown(
            "Get a detailed logistics plan, including weight estimates, "
            "application time, and pro tips generated by Gemini AI."
        )
        if st.button("Generate Logistics Plan", type="primary", key="btn_generate"):
            _run_report(session)

    elif state.status is ReportStatus.LOADING:
        st.info("A logistics plan is already being generated...")

    elif state.status is ReportStatus.ERROR:
        st.subheader("Analysis Failed")
        st.error(state.message)
        if st.button("Retry", key="btn_retry"):
            _run_report(session, retry=True)

    elif state.status is ReportStatus.SUCCESS:
        st.subheader("🤖 Logistics & Application Plan")
        for section in parse_sections(state.content):
            if section.title:
                st.markdown(f"#### {section.title}")
            if section.body:
                st.markdown(section.body)


def _render_audit(audit: AuditLogger) -> None:
    stats = audit.summary()
    if not stats["total_calls"]:
        return
    st.caption(
        f"Reports: {stats['reports_generated']} ok, {stats['errors']} failed · "
        f"Tokens: {stats['total_input_tokens']:,} in / {stats['total_output_tokens']:,} out"
    )


# ===================================================================
# Main
# ===================================================================

def main() -> None:
    """Entry point for the Streamlit Briquette estimator."""

    st.set_page_config(
        page_title="Briquette",
        page_icon="🌿",
        layout="wide",
    )

    session = _get_session()

    # -- Sidebar -----------------------------------------------------------
    with st.sidebar:
        st.title("🌿 Briquette")
        st.caption("Briquette Estimation Utility")
        settings = st.session_state["settings"]
        problem = check_provider_available(settings)
        if problem:
            st.warning("AI logistics plans are unavailable in this deployment.")
        st.caption(f"Model: {settings.model}")
        _render_audit(st.session_state[AUDIT_KEY])
        st.divider()
        st.caption(version_label())

    # -- Main area ---------------------------------------------------------
    left, right = st.columns([5, 7], gap="large")
    with left:
        _render_calculator(session)
        _render_summary(session)
    with right:
        _render_report(session)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()

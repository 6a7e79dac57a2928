"""Tests for the logistics report pipeline: prompts, guards, audit, generator."""

import pytest

from briquette.narrative import LogisticsReportGenerator
from briquette.prompts import (
    EXPECTED_SECTIONS,
    REPORT_PROMPT_TEMPLATE,
    SYSTEM_PROMPT,
    build_report_prompt,
    format_acres,
)
from briquette.providers.audit import AuditLogger
from briquette.providers.base import LLMConfig, LLMEmptyResponseError, LLMError
from briquette.providers.guards import ReportOutputGuard, parse_sections

from .conftest import SAMPLE_REPORT, FakeProvider


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

class TestBuildReportPrompt:
    def test_inputs_are_embedded(self):
        system, user = build_report_prompt(0.5, 218)
        assert system == SYSTEM_PROMPT
        assert "- Area: 0.5 acres" in user
        assert "- Product: 218 briquettes" in user
        assert "1 per 100 sq ft" in user
        assert "0.5 oz per briquette" in user

    def test_requests_every_section(self):
        _, user = build_report_prompt(3, 1307)
        for heading in EXPECTED_SECTIONS:
            assert f"## {heading}" in user

    def test_whole_acres_render_without_decimal(self):
        _, user = build_report_prompt(2.0, 872)
        assert "- Area: 2 acres" in user

    def test_overrides(self):
        system, user = build_report_prompt(
            1.5,
            654,
            overrides={"system": "Be brief.", "template": "{acres}|{units_needed}"},
        )
        assert system == "Be brief."
        assert user == "1.5|654"

    def test_default_template_is_used_without_overrides(self):
        _, user = build_report_prompt(1, 436, overrides={})
        assert user.startswith(REPORT_PROMPT_TEMPLATE.splitlines()[0])


class TestFormatAcres:
    @pytest.mark.parametrize(
        "acres, expected",
        [(1.0, "1"), (10, "10"), (0.5, "0.5"), (2.75, "2.75"), (0.1, "0.1")],
    )
    def test_format(self, acres, expected):
        assert format_acres(acres) == expected


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

class TestReportOutputGuard:
    def test_passes_through_clean_text(self):
        assert ReportOutputGuard.enforce(SAMPLE_REPORT) == SAMPLE_REPORT.strip()

    def test_strips_code_fence(self):
        wrapped = "```markdown\n## 📋 Project Overview\nSmall job.\n```"
        assert ReportOutputGuard.enforce(wrapped) == "## 📋 Project Overview\nSmall job."

    @pytest.mark.parametrize("raw", ["", "   ", "\n\n", None, "```\n```"])
    def test_empty_raises(self, raw):
        with pytest.raises(LLMEmptyResponseError):
            ReportOutputGuard.enforce(raw, provider="google")

    def test_empty_error_is_llm_error(self):
        with pytest.raises(LLMError) as exc_info:
            ReportOutputGuard.enforce("", provider="google")
        assert exc_info.value.provider == "google"

    def test_no_missing_sections_in_sample(self):
        assert ReportOutputGuard.missing_sections(SAMPLE_REPORT, EXPECTED_SECTIONS) == []

    def test_headings_match_without_emoji(self):
        text = "## Project Overview\nx\n## Logistics Estimates\ny"
        missing = ReportOutputGuard.missing_sections(text, EXPECTED_SECTIONS)
        assert missing == ["⏱️ Application Time", "💡 Pro Tips"]

    def test_missing_sections_are_logged(self, caplog):
        with caplog.at_level("WARNING", logger="briquette.providers.guards"):
            missing = ReportOutputGuard.check_sections("Just prose.", EXPECTED_SECTIONS)
        assert len(missing) == 4
        assert "missing 4 expected section" in caplog.text


class TestParseSections:
    def test_splits_on_markers(self):
        sections = parse_sections(SAMPLE_REPORT)
        assert [s.title for s in sections] == EXPECTED_SECTIONS
        assert sections[0].body == "Small residential task covering half an acre."

    def test_preamble_kept_as_untitled_section(self):
        sections = parse_sections("Intro line\n## A\nbody")
        assert sections[0].title == ""
        assert sections[0].body == "Intro line"
        assert sections[1].title == "A"

    def test_blank_preamble_dropped(self):
        sections = parse_sections("\n\n## A\nbody")
        assert len(sections) == 1

    def test_list_lines_stay_in_body(self):
        sections = parse_sections(SAMPLE_REPORT)
        tips = sections[-1].body.splitlines()
        assert tips[0].startswith("1. ")
        assert len(tips) == 3

    def test_empty_text(self):
        assert parse_sections("") == []


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class TestAuditLogger:
    def test_records_and_summary(self, fake_provider):
        audit = AuditLogger()
        response = fake_provider.generate_text("s", "u")
        audit.log(response, acres=0.5, units_needed=218)
        audit.log(None, acres=1.0, units_needed=436, provider="fake", error="boom")

        summary = audit.summary()
        assert summary["total_calls"] == 2
        assert summary["total_input_tokens"] == 120
        assert summary["total_output_tokens"] == 340
        assert summary["errors"] == 1
        assert summary["reports_generated"] == 1

        failed = audit.records[1]
        assert failed.provider == "fake"
        assert failed.input_tokens == 0

    def test_to_dict(self, fake_provider):
        record = AuditLogger().log(
            fake_provider.generate_text("s", "u"), acres=0.5, units_needed=218
        )
        d = record.to_dict()
        assert d["token_usage"] == {"input": 120, "output": 340}
        assert d["units_needed"] == 218
        assert d["error"] is None

    def test_persist_fn_called(self, fake_provider):
        persisted = []
        audit = AuditLogger(persist_fn=persisted.append)
        audit.log(fake_provider.generate_text("s", "u"))
        assert len(persisted) == 1

    def test_persist_failure_does_not_break_logging(self, fake_provider):
        def broken(record):
            raise RuntimeError("db down")

        audit = AuditLogger(persist_fn=broken)
        audit.log(fake_provider.generate_text("s", "u"))
        assert len(audit.records) == 1

    def test_records_is_a_copy(self):
        audit = AuditLogger()
        audit.records.append("x")
        assert audit.records == []


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class TestLogisticsReportGenerator:
    def test_returns_report(self, fake_provider):
        gen = LogisticsReportGenerator(fake_provider)
        assert gen.generate(0.5, 218) == SAMPLE_REPORT.strip()

    def test_sends_prompt_and_config(self, fake_provider):
        config = LLMConfig(model="gemini-2.5-pro", temperature=0.2)
        LogisticsReportGenerator(fake_provider, config=config).generate(0.5, 218)
        system, user, sent_config = fake_provider.calls[0]
        assert system == SYSTEM_PROMPT
        assert "218 briquettes" in user
        assert sent_config is config

    def test_default_config_is_flash(self, fake_provider):
        gen = LogisticsReportGenerator(fake_provider)
        assert gen.config.model == "gemini-2.5-flash"
        assert gen.config.temperature == 0.7

    def test_prompt_overrides(self, fake_provider):
        gen = LogisticsReportGenerator(
            fake_provider, prompt_overrides={"template": "{units_needed} units"}
        )
        gen.generate(1, 436)
        assert fake_provider.calls[0][1] == "436 units"

    def test_empty_response_raises(self):
        gen = LogisticsReportGenerator(FakeProvider(text=""))
        with pytest.raises(LLMEmptyResponseError):
            gen.generate(0.5, 218)

    def test_provider_error_propagates(self, failing_provider):
        gen = LogisticsReportGenerator(failing_provider)
        with pytest.raises(LLMError):
            gen.generate(0.5, 218)

    def test_audit_success(self, fake_provider):
        audit = AuditLogger()
        LogisticsReportGenerator(fake_provider, audit=audit).generate(0.5, 218)
        record = audit.records[0]
        assert record.acres == 0.5
        assert record.units_needed == 218
        assert record.error is None

    def test_audit_failure(self, failing_provider):
        audit = AuditLogger()
        gen = LogisticsReportGenerator(failing_provider, audit=audit)
        with pytest.raises(LLMError):
            gen.generate(0.5, 218)
        record = audit.records[0]
        assert record.provider == "fake"
        assert "503" in record.error

    def test_audit_empty_response(self):
        audit = AuditLogger()
        gen = LogisticsReportGenerator(FakeProvider(text="  "), audit=audit)
        with pytest.raises(LLMEmptyResponseError):
            gen.generate(0.5, 218)
        assert audit.records[0].error == "No content generated"
        assert audit.records[0].output_tokens == 340

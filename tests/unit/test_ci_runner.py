"""Unit tests for the CI runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ai_code_review.adapters.ci_runner import CIIssue, CIRunner
from ai_code_review.core.ai_service import AIService
from ai_code_review.core.models import Finding, Severity
from ai_code_review.utils.config import Settings

FINDINGS_TEXT = json.dumps(
    [
        {"type": "error", "category": "Security", "title": "SQL injection", "line": 2,
         "description": "Query built\nfrom input"},
        {"type": "warning", "category": "Style", "title": "Long line"},
        {"type": "success", "title": "Good naming"},
    ]
)


@pytest.fixture
def code_files(tmp_path: Path) -> list[Path]:
    first = tmp_path / "a.py"
    first.write_text("x = 1\n")
    second = tmp_path / "b.py"
    second.write_text("y = 2\n")
    return [first, second]


def make_runner(settings, mock_transport, openai_config, status_code=200, **kwargs) -> CIRunner:
    body = {"choices": [{"message": {"content": FINDINGS_TEXT}}]}
    transport, _ = mock_transport(status_code=status_code, body=body)
    service = AIService(settings=settings, transport=transport)
    return CIRunner(openai_config, settings=settings, service=service, **kwargs)


class TestCIRunner:
    """Tests for CIRunner."""

    def test_review_files(
        self, settings: Settings, mock_transport, openai_config, code_files
    ) -> None:
        runner = make_runner(settings, mock_transport, openai_config)

        result = runner.review_files(code_files)

        assert result.files_reviewed == 2
        assert len(result.issues) == 6
        assert result.error_count == 2
        assert result.warning_count == 2
        assert not result.success
        assert result.summary == "Reviewed 2 files. Found 2 errors, 2 warnings."

    def test_unreadable_files_are_skipped(
        self, settings: Settings, mock_transport, openai_config, tmp_path: Path
    ) -> None:
        runner = make_runner(settings, mock_transport, openai_config)

        result = runner.review_files([tmp_path / "missing.py"])

        assert result.files_reviewed == 0
        assert result.issues == []
        assert result.success

    def test_failed_review_becomes_error_issue(
        self, settings: Settings, mock_transport, openai_config, code_files
    ) -> None:
        runner = make_runner(settings, mock_transport, openai_config, status_code=401)

        result = runner.review_files(code_files[:1])

        (issue,) = result.issues
        assert issue.finding.id == "review-failed"
        assert issue.severity is Severity.ERROR
        assert issue.finding.description == "OpenAI API error: Unauthorized"
        assert not result.success

    def test_fail_on_warning(
        self, settings: Settings, mock_transport, openai_config, code_files
    ) -> None:
        lenient = make_runner(settings, mock_transport, openai_config, fail_on_error=False)
        strict = make_runner(
            settings, mock_transport, openai_config, fail_on_error=False, fail_on_warning=True
        )

        assert lenient.review_files(code_files).success
        assert not strict.review_files(code_files).success

    def test_format_json(self, settings: Settings, mock_transport, openai_config, code_files) -> None:
        runner = make_runner(settings, mock_transport, openai_config)
        result = runner.review_files(code_files[:1])

        data = json.loads(runner.format_results(result, "json"))

        assert data["files_reviewed"] == 1
        assert data["issues"][0]["file"] == str(code_files[0])
        assert data["issues"][0]["type"] == "error"

    def test_format_github(
        self, settings: Settings, mock_transport, openai_config, code_files
    ) -> None:
        runner = make_runner(settings, mock_transport, openai_config)
        result = runner.review_files(code_files[:1])

        lines = runner.format_results(result, "github").splitlines()

        assert lines[0] == (
            f"::error file={code_files[0]},line=2,title=Security::"
            "SQL injection: Query built%0Afrom input"
        )
        assert lines[1].startswith("::warning ")
        assert lines[2].startswith("::notice ")
        assert lines[-1] == result.summary

    def test_format_text(self, settings: Settings, mock_transport, openai_config, code_files) -> None:
        runner = make_runner(settings, mock_transport, openai_config)
        result = runner.review_files(code_files[:1])

        output = runner.format_results(result, "text")

        assert f"[ERROR] {code_files[0]}:2" in output
        assert "Good naming" in output

    def test_unknown_format(self, settings: Settings, mock_transport, openai_config) -> None:
        runner = make_runner(settings, mock_transport, openai_config)
        with pytest.raises(ValueError):
            runner.format_results(runner.review_files([]), "xml")


class TestCIIssue:
    """Tests for CIIssue."""

    def test_annotation_without_line(self) -> None:
        issue = CIIssue(
            "a.py", Finding(id="1", severity=Severity.INFO, category="General", title="Note")
        )
        assert issue.to_github_annotation() == "::notice file=a.py,title=General::Note"

"""CI/CD runner for automated code review in pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from ai_code_review.core.ai_service import AIService
from ai_code_review.core.models import AIConfig, Finding, Severity
from ai_code_review.core.prompt_builder import CodeContext
from ai_code_review.utils.config import Settings, get_effective_settings
from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)

SEVERITY_ICONS = {
    Severity.SUCCESS: "✓",
    Severity.WARNING: "!",
    Severity.ERROR: "✗",
    Severity.INFO: "i",
}

GITHUB_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
    Severity.SUCCESS: "notice",
}


@dataclass
class CIIssue:
    """A finding attributed to the file it was reported for."""

    file_path: str
    finding: Finding

    @property
    def severity(self) -> Severity:
        return self.finding.severity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"file": self.file_path, **self.finding.to_dict()}

    def to_github_annotation(self) -> str:
        """Format as GitHub Actions annotation."""
        location = f"file={self.file_path}"
        if self.finding.line:
            location += f",line={self.finding.line}"
        message = self.finding.title
        if self.finding.description:
            message += f": {self.finding.description}"
        # Annotation messages are single-line.
        message = message.replace("\r", "").replace("\n", "%0A")
        return f"::{GITHUB_LEVELS[self.severity]} {location},title={self.finding.category}::{message}"


@dataclass
class CIReviewResult:
    """Result from a CI review run."""

    success: bool
    issues: list[CIIssue] = field(default_factory=list)
    files_reviewed: int = 0
    error_count: int = 0
    warning_count: int = 0
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "files_reviewed": self.files_reviewed,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "summary": self.summary,
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


class CIRunner:
    """Runner for CI/CD code review."""

    def __init__(
        self,
        config: AIConfig,
        settings: Settings | None = None,
        fail_on_error: bool = True,
        fail_on_warning: bool = False,
        service: AIService | None = None,
    ):
        """
        Initialize the CI runner.

        Args:
            config: Provider configuration used for every file
            settings: Settings instance (uses effective settings if None)
            fail_on_error: Fail CI if error findings are reported
            fail_on_warning: Fail CI if warning findings are reported
            service: Review service (built from settings if None)
        """
        self.config = config
        self.settings = settings or get_effective_settings()
        self.service = service or AIService(settings=self.settings)
        self.fail_on_error = fail_on_error
        self.fail_on_warning = fail_on_warning

    def review_files(self, files: Sequence[Path | str]) -> CIReviewResult:
        """
        Review multiple files, one provider request per file.

        Args:
            files: List of file paths to review

        Returns:
            CIReviewResult with all issues
        """
        all_issues: list[CIIssue] = []
        files_reviewed = 0

        for file_path in files:
            context = CodeContext.from_file(file_path)
            if context is None:
                continue

            logger.info(f"Reviewing: {file_path}")
            files_reviewed += 1

            outcome = self.service.review(self.config, context)
            if outcome.ok:
                all_issues.extend(CIIssue(str(file_path), f) for f in outcome.findings or [])
            else:
                all_issues.append(
                    CIIssue(
                        file_path=str(file_path),
                        finding=Finding(
                            id="review-failed",
                            severity=Severity.ERROR,
                            category="Review",
                            title="Review failed",
                            description=outcome.message or "",
                        ),
                    )
                )

        error_count = sum(1 for i in all_issues if i.severity == Severity.ERROR)
        warning_count = sum(1 for i in all_issues if i.severity == Severity.WARNING)

        success = True
        if self.fail_on_error and error_count > 0:
            success = False
        if self.fail_on_warning and warning_count > 0:
            success = False

        summary = (
            f"Reviewed {files_reviewed} files. "
            f"Found {error_count} errors, {warning_count} warnings."
        )

        return CIReviewResult(
            success=success,
            issues=all_issues,
            files_reviewed=files_reviewed,
            error_count=error_count,
            warning_count=warning_count,
            summary=summary,
        )

    def format_results(self, result: CIReviewResult, output_format: str = "text") -> str:
        """
        Render results as text, json, or GitHub annotations.

        Raises:
            ValueError: For an unknown output format
        """
        if output_format == "json":
            return result.to_json()

        if output_format == "github":
            lines = [issue.to_github_annotation() for issue in result.issues]
            lines.append(result.summary)
            return "\n".join(lines)

        if output_format != "text":
            raise ValueError(f"Unknown output format: {output_format}")

        lines = [f"\n{'=' * 60}", result.summary, "=" * 60]
        for issue in result.issues:
            location = issue.file_path
            if issue.finding.line:
                location += f":{issue.finding.line}"

            icon = SEVERITY_ICONS[issue.severity]
            lines.append(f"\n{icon} [{issue.severity.value.upper()}] {location}")
            lines.append(f"   {issue.finding.title}")
            if issue.finding.description:
                lines.append(f"   {issue.finding.description}")
            if issue.finding.suggestion:
                lines.append(f"   Suggestion: {issue.finding.suggestion}")

        return "\n".join(lines)

"""Prompt builder for the code review request."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ai_code_review.utils.file_ops import read_file_safe
from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)

FOCUS_AREAS = [
    "Code quality and best practices",
    "Performance optimizations",
    "Security vulnerabilities",
    "Error handling",
    "Maintainability",
    "Testing considerations",
]


@dataclass
class CodeContext:
    """The code being reviewed and where it came from."""

    content: str
    file_path: str | None = None

    @classmethod
    def from_file(cls, file_path: Path | str) -> CodeContext | None:
        """Create a CodeContext from a file path."""
        path = Path(file_path)
        content = read_file_safe(path)

        if content is None:
            return None

        return cls(content=content, file_path=str(path))

    @property
    def display_name(self) -> str:
        return self.file_path or "<stdin>"


class PromptBuilder:
    """Builder for the single-turn review prompt."""

    # The model is asked for exactly the Finding wire shape.
    REVIEW_PROMPT_TEMPLATE = """Analyze the following code for best practices, potential issues, performance optimizations, and security concerns. Return your analysis as a JSON array of objects with the following structure:

{{
  "id": "unique-id",
  "type": "success|warning|error|info",
  "category": "category-name",
  "title": "short-title",
  "description": "detailed-description",
  "line": optional-line-number,
  "suggestion": "improvement-suggestion"
}}

Focus on:
{focus_areas}

Code to analyze:
```
{code}
```

Return only the JSON array, no additional text."""

    def __init__(self, focus_areas: list[str] | None = None):
        """
        Initialize the prompt builder.

        Args:
            focus_areas: Review focus bullet points (uses the default list if None)
        """
        self.focus_areas = focus_areas or list(FOCUS_AREAS)

    def build_review_prompt(self, code: CodeContext | str) -> str:
        """
        Build the review prompt with the code embedded verbatim.

        Args:
            code: Code content or a CodeContext

        Returns:
            The prompt text
        """
        content = code.content if isinstance(code, CodeContext) else code
        focus = "\n".join(f"- {area}" for area in self.focus_areas)

        prompt = self.REVIEW_PROMPT_TEMPLATE.format(focus_areas=focus, code=content)
        logger.debug(f"Built review prompt ({len(prompt)} chars)")
        return prompt

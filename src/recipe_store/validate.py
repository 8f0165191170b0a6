"""
Validation reports for recipe files.

Wraps the reader so a file can be checked without loading it into the
working collection, and presents the outcome as text or JSON.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import RecipeLoadError, RecipeValidationError, StorageError
from .reader import deserialize

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """Represents a single validation issue."""

    path: str
    message: str
    kind: str = "structural"  # "structural" or "semantic"
    position: Optional[int] = None

    def __str__(self) -> str:
        location = self.path
        if self.position is not None:
            location += f" @{self.position}"
        return f"❌ {location}: {self.message}"

    @classmethod
    def from_error(cls, error: RecipeLoadError) -> "ValidationIssue":
        kind = "semantic" if isinstance(error, RecipeValidationError) else "structural"
        return cls(
            path=error.json_path,
            message=error.message,
            kind=kind,
            position=getattr(error, "position", None),
        )


@dataclass
class ValidationReport:
    """Result of validating a recipes file."""

    file_path: Optional[Path] = None
    is_valid: bool = True
    recipe_count: int = 0
    ingredient_count: int = 0
    issues: List[ValidationIssue] = field(default_factory=list)

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)
        self.is_valid = False

    def format_text(self) -> str:
        """Format the report as human-readable text."""
        lines = []
        if self.file_path:
            lines.append(f"Validation report for: {self.file_path}")
            lines.append("")

        if self.is_valid:
            lines.append(
                f"✅ Valid: {self.recipe_count} recipe(s), "
                f"{self.ingredient_count} ingredient line(s)"
            )
        else:
            lines.append("Status: ❌ INVALID")
            for issue in self.issues:
                lines.append(f"  {issue}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": str(self.file_path) if self.file_path else None,
            "is_valid": self.is_valid,
            "recipe_count": self.recipe_count,
            "ingredient_count": self.ingredient_count,
            "issues": [
                {
                    "path": i.path,
                    "message": i.message,
                    "kind": i.kind,
                    "position": i.position,
                }
                for i in self.issues
            ],
        }


def validate_recipes_text(text: str, file_path: Optional[Path] = None) -> ValidationReport:
    """
    Check a recipe document.

    Loading stops at the first problem, so an invalid report carries
    exactly one issue.
    """
    report = ValidationReport(file_path=file_path)
    try:
        book = deserialize(text)
    except RecipeLoadError as e:
        report.add_issue(ValidationIssue.from_error(e))
        logger.debug(f"Validation failed: {e}")
        return report

    report.recipe_count = len(book)
    report.ingredient_count = sum(r.total_ingredient_count() for r in book)
    return report


def validate_recipes_file(file_path: Path) -> ValidationReport:
    """
    Check a recipes file on disk.

    Raises:
        StorageError: If the file cannot be read.
    """
    try:
        text = Path(file_path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Error reading {file_path}: {e}")
    return validate_recipes_text(text, file_path=Path(file_path))

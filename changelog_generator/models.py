"""
Data models for the changelog generator.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SourceType(str, Enum):
    """Where the raw material of a changelog comes from."""
    MANUAL = "manual"
    GITHUB = "github"


class OutputFormat(str, Enum):
    """Output format requested from the generation backend."""
    MARKDOWN = "markdown"
    HTML = "html"
    PLAIN_TEXT = "text"


class Template(str, Enum):
    """Stylistic preset passed through to the prompt."""
    FEATURE = "feature"
    BUGFIX = "bugfix"
    UPDATE = "update"
    MOBILE = "mobile"
    STANDARD = "standard"


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as fetched from GitHub, only kept for one request."""
    message: str
    author: str

    def render(self) -> str:
        """Render the commit as one raw-material line."""
        return f"- {self.message} (Author: {self.author})"


@dataclass(frozen=True)
class GenerationResult:
    """Generated changelog text together with its derived title."""
    title: str
    changelog: str

    def to_dict(self) -> Dict[str, str]:
        return {"changelog": self.changelog, "title": self.title}


@dataclass
class ChangelogRecord:
    """A changelog saved by a signed-in user."""
    id: int
    user_id: str
    title: str = "Untitled Changelog"
    input_content: Optional[str] = None
    output_content: Optional[str] = None
    source_type: str = SourceType.MANUAL.value
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase wire names."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "inputContent": self.input_content,
            "outputContent": self.output_content,
            "sourceType": self.source_type,
            "settings": self.settings,
            "createdAt": self.created_at.isoformat(),
        }

"""
Pydantic models for the translation review returned by the completion API.

The model is instructed to answer with:

    {
      "summary": "...",
      "issues": [
        {"filePath": "de.json", "lineContent": "...", "comment": "..."}
      ]
    }
"""

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReviewIssue(BaseModel):
    """
    A single problem the reviewer found in a translation file.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    file_path: str = Field(..., alias="filePath", description="Path of the translation file")
    line_content: str = Field("", alias="lineContent", description="Line text used to locate the issue")
    comment: str = Field("", description="Explanation, optionally with a suggestion block")

    @field_validator("file_path")
    @classmethod
    def strip_leading_slash(cls, value: str) -> str:
        """Paths are repository relative."""
        return value.strip().lstrip("/")


class ReviewResult(BaseModel):
    """
    The full review: a short summary plus the list of issues.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: str = Field("", description="One or two sentence summary of the findings")
    issues: List[ReviewIssue] = Field(default_factory=list, description="Problems found")

    @field_validator("issues", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return value or []


@dataclass
class LocatedIssue:
    """A review issue together with the line it was anchored to (-1 if not found)."""
    file_path: str
    line_content: str
    comment: str
    line_number: int = -1

    @property
    def is_located(self) -> bool:
        return self.line_number != -1


@dataclass(frozen=True)
class FileContent:
    """Full text of a file at the pull request head."""
    path: str
    content: str

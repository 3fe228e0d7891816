"""
Check Run Publisher for the Translation Review Bot.

This module turns a review into a GitHub check run: issues anchored to a
line become annotations, everything else goes into the check summary.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .config.prompts import INTRO_MESSAGE
from .github_client import GitHubClient
from .models import LocatedIssue, ReviewResult
from .utils.exceptions import CheckRunError, ReviewBotError
from .utils.logger import get_logger, review_logger

# GitHub accepts at most 50 annotations per request
MAX_ANNOTATIONS = 50
ANNOTATION_LEVEL = "warning"


@dataclass
class GeneralComment:
    """An issue that could not be attached to a line."""
    file_path: str
    comment: str


@dataclass
class CheckRunOutput:
    """Everything needed for the check run body."""
    title: str
    summary: str
    conclusion: str
    annotations: List[Dict[str, Any]] = field(default_factory=list)
    general_comments: List[GeneralComment] = field(default_factory=list)

    def to_output(self) -> Dict[str, Any]:
        """The ``output`` object; annotations are only sent when there are some."""
        output: Dict[str, Any] = {"title": self.title, "summary": self.summary}
        if self.annotations:
            output["annotations"] = self.annotations
        return output


def build_check_run_output(
    review: ReviewResult,
    located_issues: Sequence[LocatedIssue],
    max_annotations: int = MAX_ANNOTATIONS
) -> CheckRunOutput:
    """
    Split located issues into annotations and general comments.

    Args:
        review: The model's review (its summary is used)
        located_issues: Issues with their resolved line numbers
        max_annotations: Annotation limit; further located issues are
            listed in the summary as ``path:line - comment``

    Returns:
        CheckRunOutput with title, summary, conclusion and annotations
    """
    annotations: List[Dict[str, Any]] = []
    general_comments: List[GeneralComment] = []

    for issue in located_issues:
        if not issue.is_located:
            general_comments.append(GeneralComment(issue.file_path, issue.comment))
        elif len(annotations) < max_annotations:
            annotations.append({
                "path": issue.file_path,
                "start_line": issue.line_number,
                "end_line": issue.line_number,
                "annotation_level": ANNOTATION_LEVEL,
                "message": issue.comment,
                "title": f"Translation issue in {issue.file_path}",
            })
        else:
            general_comments.append(GeneralComment(
                issue.file_path,
                f"{issue.file_path}:{issue.line_number} - {issue.comment}"
            ))

    summary = INTRO_MESSAGE + review.summary

    if general_comments:
        summary += "\n\n## General Comments\n\n"
        for general in general_comments:
            summary += f"**{general.file_path}:**\n{general.comment}\n\n"

    issue_count = len(located_issues)
    if len(annotations) >= max_annotations and issue_count > len(annotations):
        summary += (
            f"\n\n⚠️ Note: Found {issue_count} issues total. "
            f"Showing first {max_annotations} as annotations. See details above."
        )

    if issue_count:
        title = f"Found {issue_count} translation issue{'s' if issue_count > 1 else ''}"
        conclusion = "action_required"
    else:
        title = "No translation issues found"
        conclusion = "success"

    return CheckRunOutput(
        title=title,
        summary=summary,
        conclusion=conclusion,
        annotations=annotations,
        general_comments=general_comments
    )


class CheckPublisher:
    """Publishes a review as a completed check run."""

    def __init__(self, client: GitHubClient, check_name: str, max_annotations: int = MAX_ANNOTATIONS):
        self.client = client
        self.check_name = check_name
        self.max_annotations = max_annotations
        self.logger = get_logger("check_publisher")

    def publish(
        self,
        review: ReviewResult,
        located_issues: Sequence[LocatedIssue],
        head_sha: str
    ) -> Dict[str, Any]:
        """
        Create the check run for a review.

        Returns:
            The created check run

        Raises:
            CheckRunError: If GitHub rejects the check run
        """
        started = time.time()
        output = build_check_run_output(review, located_issues, self.max_annotations)

        payload = {
            "name": self.check_name,
            "head_sha": head_sha,
            "status": "completed",
            "conclusion": output.conclusion,
            "output": output.to_output(),
        }

        self.logger.info("Creating check run...")
        try:
            result = self.client.create_check_run(payload)
        except ReviewBotError as e:
            self.logger.error(f"Failed to create check run: {e}", extra={"error_details": e.to_dict()})
            raise CheckRunError(
                f"Failed to create check run: {e}",
                annotation_count=len(output.annotations),
                head_sha=head_sha
            ) from e

        review_logger.log_check_publication(
            annotations=len(output.annotations),
            general_comments=len(output.general_comments),
            conclusion=output.conclusion,
            publication_time_ms=(time.time() - started) * 1000
        )
        return result

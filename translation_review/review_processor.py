"""
Review Processor for the Translation Review Bot.

This module handles the main review flow for one pull request: fetch the
diff, extract translation changes, ask the completion model for a review,
locate the reported lines and publish the result as a check run.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .check_publisher import CheckPublisher, build_check_run_output
from .config.prompts import build_messages
from .config.settings import SettingsProtocol
from .diff_filter import filter_diff_by_ignored_files
from .diff_parser import TranslationChange, get_touched_translation_files, parse_translation_changes_from_diff
from .github_client import GitHubClient
from .line_locator import locate_issue_lines
from .models import FileContent, LocatedIssue, ReviewResult
from .openai_client import AzureOpenAIClient
from .translations import load_reference_translations
from .utils.exceptions import ReviewBotError
from .utils.logger import get_logger, review_logger

NO_CHANGES_SUMMARY = "No translation changes found."


@dataclass
class ReviewContext:
    """Context information for one review run."""
    repository: str
    pr_number: str
    head_sha: str = ""
    title: str = ""
    description: str = ""
    processing_stats: Dict[str, Any] = field(default_factory=dict)

    def update_processing_stats(self, **kwargs) -> None:
        self.processing_stats.update(kwargs)


class ReviewProcessor:
    """
    Handles the main review processing logic.

    This class is responsible for:
    - Fetching the pull request and its diff
    - Extracting translation changes against the source-language file
    - Requesting the review and locating reported lines
    - Replacing the bot's previous comments with a check run
    """

    def __init__(
        self,
        settings: SettingsProtocol,
        github_client: Optional[GitHubClient] = None,
        completion_client: Optional[AzureOpenAIClient] = None
    ):
        """
        Initialize the review processor.

        Args:
            settings: Application settings instance
            github_client: GitHub client (built from settings when omitted)
            completion_client: Completion client (built lazily when omitted)
        """
        self.settings = settings
        self.logger = get_logger("review_processor")
        self.github_client = github_client or GitHubClient(settings)
        self._completion_client = completion_client

    @property
    def completion_client(self) -> AzureOpenAIClient:
        if self._completion_client is None:
            self._completion_client = AzureOpenAIClient(self.settings)
        return self._completion_client

    def extract_changes(self, diff: str, context: ReviewContext) -> List[TranslationChange]:
        """
        Filter the diff and extract translation changes.

        The source-language file is read at the head commit; when it is
        missing every change gets the no-source placeholder.
        """
        started = time.time()
        source_file = self.settings.source_language_file

        filtered = filter_diff_by_ignored_files(diff, self.settings.ignore_policy()) or ""
        reference = load_reference_translations(
            self.github_client.get_file_content(source_file, context.head_sha),
            source=source_file
        )
        changes = parse_translation_changes_from_diff(filtered, reference, source_file)

        review_logger.log_diff_processing(
            diff_size=len(diff),
            filtered_size=len(filtered),
            changes_found=len(changes),
            reference_keys=len(reference),
            processing_time_ms=(time.time() - started) * 1000
        )
        context.update_processing_stats(changes_found=len(changes), reference_keys=len(reference))
        return changes

    def fetch_file_contents(self, diff: str, context: ReviewContext) -> List[FileContent]:
        """Fetch every touched translation file at the head commit."""
        paths = get_touched_translation_files(
            diff,
            self.settings.ignore_policy(),
            self.settings.source_language_file
        )

        contents: List[FileContent] = []
        for path in paths:
            content = self.github_client.get_file_content(path, context.head_sha)
            if content is None:
                self.logger.warning(f"No content available for {path}, its issues cannot be anchored")
                continue
            contents.append(FileContent(path=path, content=content))

        self.logger.info(f"Fetched content for {len(contents)} of {len(paths)} touched files")
        return contents

    def publish_review(
        self,
        review: ReviewResult,
        located_issues: List[LocatedIssue],
        context: ReviewContext,
        dry_run: bool = False
    ) -> int:
        """
        Replace the bot's earlier comments with a fresh check run.

        Returns:
            Number of annotations in the check run
        """
        output = build_check_run_output(review, located_issues, self.settings.max_annotations)
        if dry_run:
            self.logger.info(
                "Dry run mode - skipping check run publication",
                extra={
                    "would_publish_annotations": len(output.annotations),
                    "would_publish_general_comments": len(output.general_comments),
                    "conclusion": output.conclusion
                }
            )
            return len(output.annotations)

        deleted = self.github_client.delete_comments_by_user(self.settings.bot_username)
        context.update_processing_stats(comments_deleted=deleted)

        publisher = CheckPublisher(
            self.github_client,
            check_name=self.settings.check_name,
            max_annotations=self.settings.max_annotations
        )
        check_run = publisher.publish(review, located_issues, context.head_sha)
        context.update_processing_stats(check_run_id=check_run.get("id"))

        return len(output.annotations)

    def process_pull_request(self, dry_run: bool = False) -> Dict[str, Any]:
        """
        Process a single pull request end-to-end.

        Args:
            dry_run: Skip comment deletion and check run publication

        Returns:
            Dictionary with processing results and statistics

        Raises:
            ReviewBotError: If processing fails
        """
        start_time = time.time()
        context = ReviewContext(
            repository=self.settings.repository,
            pr_number=self.settings.pr_number
        )

        try:
            self.logger.info(
                "Starting PR translation review",
                extra={"repository": context.repository, "pr_number": context.pr_number, "dry_run": dry_run}
            )

            pull_request = self.github_client.get_pull_request()
            context.head_sha = (pull_request.get("head") or {}).get("sha", "")
            context.title = pull_request.get("title") or ""
            context.description = pull_request.get("body") or ""

            diff = self.github_client.get_pull_request_diff()
            changes = self.extract_changes(diff, context)

            if not changes:
                self.logger.info("No translation changes found in the diff")
                review = ReviewResult(summary=NO_CHANGES_SUMMARY)
                annotations = self.publish_review(review, [], context, dry_run)
                return self._result(start_time, context, review, [], annotations)

            review = self.completion_client.review_translations(
                build_messages(context.title, context.description, changes)
            )
            context.update_processing_stats(token_usage=self.completion_client.get_token_usage_stats())
            self.logger.info(f"Review returned {len(review.issues)} issues")

            file_contents = self.fetch_file_contents(diff, context) if review.issues else []
            located_issues = locate_issue_lines(review.issues, file_contents)
            review_logger.log_line_location(
                issues_total=len(located_issues),
                issues_located=sum(1 for issue in located_issues if issue.is_located)
            )

            annotations = self.publish_review(review, located_issues, context, dry_run)
            return self._result(start_time, context, review, located_issues, annotations, changes)

        except ReviewBotError:
            self.logger.error(
                "PR translation review failed",
                extra={"processing_time": time.time() - start_time},
                exc_info=True
            )
            raise
        except Exception as e:
            error_msg = f"PR translation review failed: {e}"
            self.logger.error(
                error_msg,
                extra={"processing_time": time.time() - start_time, "error_type": type(e).__name__},
                exc_info=True
            )
            raise ReviewBotError(error_msg) from e

    def _result(
        self,
        start_time: float,
        context: ReviewContext,
        review: ReviewResult,
        located_issues: List[LocatedIssue],
        annotations: int,
        changes: Optional[List[TranslationChange]] = None
    ) -> Dict[str, Any]:
        total_time = time.time() - start_time
        context.update_processing_stats(total_processing_time=total_time)

        self.logger.info("PR translation review completed successfully", extra=context.processing_stats)

        return {
            "status": "success",
            "summary": review.summary,
            "changes": len(changes or []),
            "issues": len(located_issues),
            "annotations": annotations,
            "processing_time": total_time,
            "stats": context.processing_stats,
        }

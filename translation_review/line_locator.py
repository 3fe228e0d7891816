"""
Line locator for review comments.

GitHub anchors check-run annotations to a single line. Review issues only
carry the text of the line(s) they refer to, so this module finds that
text in the file at the pull request head and reports the line number.
Multi-line matches are reported at their LAST line, which is where GitHub
expects a comment on a multi-line range.
"""

from typing import Iterable, List, Mapping, Optional

from .models import FileContent, LocatedIssue, ReviewIssue
from .pattern_matcher import compile_snippet
from .utils.logger import get_logger

NOT_FOUND = -1

logger = get_logger(__name__)


def get_line_number(text: Optional[str], search_string: Optional[str]) -> int:
    """
    Find the line number of a snippet in a text.

    Args:
        text: The full file content to search in
        search_string: The snippet to find (can be multi-line)

    Returns:
        1-based line number of the last line of the first match,
        or -1 if either argument is empty or the snippet is not found
    """
    if not text or not search_string:
        return NOT_FOUND

    match = compile_snippet(search_string).search(text)
    if match is None:
        return NOT_FOUND

    start_line = text.count("\n", 0, match.start) + 1
    return start_line + match.text.count("\n")


def locate_issue_lines(
    issues: Iterable[ReviewIssue],
    file_contents: Iterable[FileContent]
) -> List[LocatedIssue]:
    """
    Resolve the line number of every review issue.

    Issues whose text cannot be found (or whose file content is not
    available) keep line -1 and get the quoted line appended to their
    comment, so a general comment still shows what it is about.
    """
    contents: Mapping[str, str] = {file.path: file.content for file in file_contents}
    located: List[LocatedIssue] = []

    for issue in issues:
        content = contents.get(issue.file_path)
        line_number = get_line_number(content, issue.line_content) if content is not None else NOT_FOUND

        comment = issue.comment
        if line_number == NOT_FOUND:
            logger.debug(
                f"Line not found in {issue.file_path}",
                extra={"file_path": issue.file_path, "has_content": content is not None}
            )
            if issue.line_content:
                comment = f"{comment}\n{issue.file_path}:\n```\n{issue.line_content}\n```"

        located.append(LocatedIssue(
            file_path=issue.file_path,
            line_content=issue.line_content,
            comment=comment,
            line_number=line_number
        ))

    return located

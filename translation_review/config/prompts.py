"""Prompt templates for the translation review.

The completion model gets a fixed system prompt and a user prompt that
carries the review rules, the required JSON answer format, the pull
request title/description and the extracted translation changes.
"""

import json
from typing import Dict, List, Optional, Sequence

from ..diff_parser import TranslationChange

SYSTEM_PROMPT = """You are an expert translator and localization specialist. You review translations for an EV route planner and navigation app (A Better Routeplanner / ABRP).

Your task is to review translation changes and provide feedback in a specific JSON format. Always respond with valid JSON only - no markdown, no explanations outside the JSON."""

# Static intro prefixed to the check summary (never sent to the model)
INTRO_MESSAGE = """👋 Thank you for contributing translations to ABRP!

🤖 **This is an automated AI review** to help catch potential translation issues. This feature is new, so please let us know if the AI suggests anything that seems incorrect or unhelpful.

---

"""

REVIEW_INSTRUCTIONS = """Review the translation changes below. Follow these rules strictly:

## What to Review
1. Translation accuracy - does the translation convey the same meaning as the English source?
2. Grammar and spelling errors in the translation
3. Consistency - are similar terms translated consistently?
4. Placeholder preservation - are {{placeholders}} kept intact and not translated?
5. Pluralization rules - are plural forms correct for the target language?
6. Context appropriateness - is the translation suitable for an EV route planner app?
7. Untranslated content - is there English text left untranslated that should be translated?

## What NOT to Review
1. The English source text (only review the translations)
2. Minor stylistic preferences that don't affect meaning
3. Positive feedback - only report problems
4. Formatting/whitespace issues that don't affect the meaning

## Output Format
Respond with ONLY a JSON object in this exact structure:
{
  "summary": "Brief 1-2 sentence summary of findings, or 'No significant issues found.' if none",
  "issues": [
    {
      "filePath": "xx.json",
      "lineContent": "exact line content to match in the file",
      "comment": "Brief explanation of the issue"
    }
  ]
}

## lineContent Rules (IMPORTANT for line matching)
The lineContent field is used to find the exact line number in the file. Follow these rules:
1. Use the EXACT line as it appears in the "line" field of the changed translations
2. Include the full line with the key and value, e.g.: "  \\"key\\": \\"translated value\\","
3. Do NOT paraphrase or modify the line content

## GitHub Suggestions
When you can propose a better translation, use GitHub's suggestion syntax in the comment field:
```suggestion
  "key": "improved translation",
```

IMPORTANT: Preserve the EXACT indentation (2 spaces) and include the trailing comma if present in the original.

Example:
{
  "filePath": "de.json",
  "lineContent": "  \\"starting_point\\": \\"Startpunkttt\\",",
  "comment": "Typo in German translation:\\n```suggestion\\n  \\"starting_point\\": \\"Startpunkt\\",\\n```"
}

Only use suggestions when you have a specific improvement. For general issues without a clear fix, just explain the problem.

If there are no issues, return: {"summary": "No significant issues found.", "issues": []}

"""


def build_user_prompt(
    title: Optional[str],
    description: Optional[str],
    changes: Sequence[TranslationChange]
) -> str:
    """
    Build the user prompt for a set of translation changes.

    Args:
        title: Pull request title (omitted when empty)
        description: Pull request body (omitted when empty)
        changes: Extracted translation changes

    Returns:
        Prompt text
    """
    parts = [REVIEW_INSTRUCTIONS]
    if title:
        parts.append(f"## PR Title\n{title}\n\n")
    if description:
        parts.append(f"## PR Description\n{description}\n\n")
    parts.append("## Changed Translations\n")
    parts.append(json.dumps([change.to_dict() for change in changes], indent=2, ensure_ascii=False))
    return "".join(parts)


def build_messages(
    title: Optional[str],
    description: Optional[str],
    changes: Sequence[TranslationChange]
) -> List[Dict[str, str]]:
    """Chat messages for the completion request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(title, description, changes)},
    ]

"""
Configuration management for the Translation Review Bot.

Settings come from environment variables (a local ``.env`` file is loaded
first) and are validated on instantiation.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from dotenv import load_dotenv

from ..diff_filter import (
    DEFAULT_IGNORED_FILES,
    DEFAULT_IGNORED_PREFIXES,
    DEFAULT_IGNORED_SUFFIXES,
    IgnorePolicy,
)

# Load environment variables from .env file
load_dotenv()

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["text", "json"]

INT_FIELDS = ["max_annotations", "request_timeout"]
LIST_FIELDS = ["ignore_exact_names", "ignore_prefixes", "ignore_suffixes"]


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults where applicable; required
    credentials are checked by ConfigurationManager so that a
    Settings object can always be built (e.g. for --validate-only).
    """

    # GitHub Configuration
    github_token: str = field(default_factory=lambda: os.getenv("GITHUB_TOKEN", ""))
    github_api_url: str = field(default="https://api.github.com")
    repository: str = field(default_factory=lambda: os.getenv("GITHUB_REPOSITORY", ""))
    pr_number: str = field(default_factory=lambda: os.getenv("PR_NUMBER", ""))

    # Azure OpenAI Configuration
    azure_openai_key: str = field(default_factory=lambda: os.getenv("AZURE_OPEN_AI_SECRET", ""))
    azure_openai_url: str = field(default_factory=lambda: os.getenv("AZURE_OPEN_AI_URL", ""))
    azure_openai_deployment: str = field(default_factory=lambda: os.getenv("AZURE_OPEN_AI_DEPLOYMENT", ""))
    azure_openai_api_version: str = field(default="2024-12-01-preview")

    # Review Configuration
    source_language_file: str = field(default="en.json")
    bot_username: str = field(default="github-actions[bot]")
    check_name: str = field(default="AI Translation Review")
    max_annotations: int = field(default=50)
    request_timeout: int = field(default=60)

    # File Filtering
    ignore_exact_names: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_FILES))
    ignore_prefixes: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_PREFIXES))
    ignore_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_SUFFIXES))

    # Logging Configuration
    log_level: str = field(default="INFO")
    log_format: str = field(default="text")
    log_file: Optional[str] = field(default=None)

    def __post_init__(self):
        """Validate settings after initialization."""
        self.log_level = self.log_level.upper()
        self.log_format = self.log_format.lower()

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if self.log_format not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of: {', '.join(VALID_LOG_FORMATS)}")

        # GitHub caps annotations at 50 per request
        if not 1 <= self.max_annotations <= 50:
            raise ValueError("max_annotations must be between 1 and 50")

        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        self.pr_number = str(self.pr_number).strip()
        self.github_api_url = self.github_api_url.rstrip("/")
        self.azure_openai_url = self.azure_openai_url.rstrip("/")

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0] if "/" in self.repository else ""

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1] if "/" in self.repository else ""

    def ignore_policy(self) -> IgnorePolicy:
        """Build the diff ignore policy from the configured lists."""
        return IgnorePolicy.from_patterns(
            exact_names=self.ignore_exact_names,
            prefixes=self.ignore_prefixes,
            suffixes=self.ignore_suffixes,
        )

    def get_github_headers(self) -> Dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28"
        }
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"
        return headers

    def get_azure_openai_headers(self) -> Dict[str, str]:
        """Get headers for Azure OpenAI requests."""
        return {
            "api-key": self.azure_openai_key,
            "Content-Type": "application/json"
        }

    def get_completions_url(self) -> str:
        """Chat completions endpoint of the configured deployment."""
        return (
            f"{self.azure_openai_url}/openai/deployments/{self.azure_openai_deployment}"
            f"/chat/completions?api-version={self.azure_openai_api_version}"
        )

    def log_context(self) -> Dict[str, str]:
        """Pull request context attached to every log record."""
        return {"repository": self.repository, "pr_number": self.pr_number}

    @classmethod
    def from_env(cls, **kwargs) -> "Settings":
        """Create Settings instance from environment variables with optional overrides."""
        env_vars = {}

        # Map environment variables to field names
        env_mapping = {
            "GITHUB_TOKEN": "github_token",
            "GITHUB_API_URL": "github_api_url",
            "GITHUB_REPOSITORY": "repository",
            "PR_NUMBER": "pr_number",
            "AZURE_OPEN_AI_SECRET": "azure_openai_key",
            "AZURE_OPEN_AI_URL": "azure_openai_url",
            "AZURE_OPEN_AI_DEPLOYMENT": "azure_openai_deployment",
            "AZURE_OPEN_AI_API_VERSION": "azure_openai_api_version",
            "SOURCE_LANGUAGE_FILE": "source_language_file",
            "BOT_USERNAME": "bot_username",
            "CHECK_NAME": "check_name",
            "MAX_ANNOTATIONS": "max_annotations",
            "REQUEST_TIMEOUT": "request_timeout",
            "IGNORE_FILES": "ignore_exact_names",
            "IGNORE_PREFIXES": "ignore_prefixes",
            "IGNORE_SUFFIXES": "ignore_suffixes",
            "LOG_LEVEL": "log_level",
            "LOG_FORMAT": "log_format",
            "LOG_FILE": "log_file"
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                env_vars[field_name] = os.environ[env_var]

        # Convert numeric and list strings
        for key, value in env_vars.items():
            if key in INT_FIELDS:
                env_vars[key] = int(value)
            elif key in LIST_FIELDS:
                env_vars[key] = _split_list(value)

        env_vars.update(kwargs)

        return cls(**env_vars)


class SettingsProtocol(Protocol):
    """Protocol for settings interface."""
    github_token: str
    github_api_url: str
    repository: str
    pr_number: str
    azure_openai_key: str
    azure_openai_url: str
    azure_openai_deployment: str
    azure_openai_api_version: str
    source_language_file: str
    bot_username: str
    check_name: str
    max_annotations: int
    request_timeout: int
    log_level: str
    log_format: str
    log_file: Optional[str]

    @property
    def owner(self) -> str: ...
    @property
    def repo(self) -> str: ...
    def ignore_policy(self) -> IgnorePolicy: ...
    def get_github_headers(self) -> Dict[str, str]: ...
    def get_azure_openai_headers(self) -> Dict[str, str]: ...
    def get_completions_url(self) -> str: ...
    def log_context(self) -> Dict[str, str]: ...

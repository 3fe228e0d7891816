"""
Configuration Manager for the Translation Review Bot.

This module validates the environment before a review run starts.
"""

import re
from typing import Dict, List

from .config.settings import SettingsProtocol
from .utils.logger import get_logger
from .utils.exceptions import ConfigurationError

REPOSITORY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$')


class ConfigurationManager:
    """
    Manages environment validation.

    This class is responsible for:
    - Checking that required environment variables are set
    - URL and repository format validation
    - Warning about an empty ignore policy
    """

    # Required environment variables, mapped to settings fields
    REQUIRED_VARS_DRY_RUN: Dict[str, str] = {
        "GITHUB_REPOSITORY": "repository",
        "PR_NUMBER": "pr_number",
        "AZURE_OPEN_AI_SECRET": "azure_openai_key",
        "AZURE_OPEN_AI_URL": "azure_openai_url",
        "AZURE_OPEN_AI_DEPLOYMENT": "azure_openai_deployment",
    }
    REQUIRED_VARS_FULL: Dict[str, str] = {
        **REQUIRED_VARS_DRY_RUN,
        "GITHUB_TOKEN": "github_token",
    }

    def __init__(self, settings: SettingsProtocol):
        """
        Initialize the configuration manager.

        Args:
            settings: Application settings instance
        """
        self.settings = settings
        self.logger = get_logger("config")

    def validate_url(self, url: str, name: str) -> None:
        """
        Validate that a URL has proper format.

        Raises:
            ConfigurationError: If URL format is invalid
        """
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid {name}: {url}", config_key=name, config_value=url)

    def missing_variables(self, dry_run: bool = False) -> List[str]:
        """Names of required environment variables that have no value."""
        required = self.REQUIRED_VARS_DRY_RUN if dry_run else self.REQUIRED_VARS_FULL
        return [
            env_var for env_var, field_name in required.items()
            if not getattr(self.settings, field_name, "")
        ]

    def validate_environment(self, dry_run: bool = False) -> bool:
        """
        Validate all required environment variables and settings.

        Args:
            dry_run: Whether this is a dry run (a public repository can be
                read without GITHUB_TOKEN)

        Returns:
            True if validation passes

        Raises:
            ConfigurationError: If required settings are missing or invalid
        """
        self.logger.info("Validating environment and configuration")

        missing_vars = self.missing_variables(dry_run)
        if missing_vars:
            self.logger.error(f"Missing required environment variables: {', '.join(missing_vars)}")
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )

        if not REPOSITORY_PATTERN.match(self.settings.repository):
            raise ConfigurationError(
                f"GITHUB_REPOSITORY must look like owner/repo, got: {self.settings.repository}",
                config_key="GITHUB_REPOSITORY",
                config_value=self.settings.repository
            )

        if not self.settings.pr_number.isdigit():
            raise ConfigurationError(
                f"PR_NUMBER must be a number, got: {self.settings.pr_number}",
                config_key="PR_NUMBER",
                config_value=self.settings.pr_number
            )

        self.validate_url(self.settings.github_api_url, "GITHUB_API_URL")
        self.validate_url(self.settings.azure_openai_url, "AZURE_OPEN_AI_URL")

        policy = self.settings.ignore_policy()
        if not (policy.exact_names or policy.prefixes or policy.suffixes):
            self.logger.warning("No ignore rules configured, every file in the diff will be considered")

        self.logger.info("Environment validation completed successfully")
        return True

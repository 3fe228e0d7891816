"""
Azure OpenAI client for translation review.

This module sends the review prompt to a chat completions deployment and
parses the model's JSON answer into a ReviewResult.
"""

import json
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .config.settings import SettingsProtocol
from .models import ReviewResult
from .utils.exceptions import CompletionAPIError, ReviewParseError
from .utils.logger import api_logger
from .utils.retry import RetryConfig, retry_with_backoff

# Some deployments wrap JSON answers in a markdown fence despite instructions
CODE_FENCE_PATTERN = re.compile(r'^\s*```(?:json)?\s*\n(.*?)\n\s*```\s*$', re.DOTALL)


class TokenUsage:
    """Token usage reported for one completion call."""

    def __init__(self, prompt_tokens: int = 0, completion_tokens: int = 0, total_tokens: int = 0):
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = total_tokens

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "TokenUsage":
        usage = response.get("usage") or {}
        return cls(
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0)
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens
        }


class AzureOpenAIClient:
    """
    Client for an Azure OpenAI chat completions deployment.

    Handles the HTTP call, retries transient failures and turns the
    model's answer into a ReviewResult.
    """

    def __init__(
        self,
        settings: SettingsProtocol,
        timeout: Optional[int] = None,
        retry_config: Optional[RetryConfig] = None
    ):
        """
        Initialize the completion client.

        Args:
            settings: Application settings (URL, deployment, key)
            timeout: Request timeout in seconds (defaults to settings.request_timeout)
            retry_config: Retry behaviour for transient failures
        """
        if not settings.azure_openai_key:
            raise ValueError("Azure OpenAI key is required. Set AZURE_OPEN_AI_SECRET environment variable.")

        self.url = settings.get_completions_url()
        self.deployment = settings.azure_openai_deployment
        self.headers = settings.get_azure_openai_headers()
        self.timeout = timeout or settings.request_timeout
        self.retry_config = retry_config or RetryConfig(
            max_retries=3,
            initial_delay=1.0,
            max_delay=30.0,
            backoff_factor=2.0
        )
        self.token_usage: List[TokenUsage] = []

        api_logger.logger.info(f"Azure OpenAI client initialized for deployment: {self.deployment}")

    def review_translations(self, messages: List[Dict[str, str]]) -> ReviewResult:
        """
        Ask the model to review translation changes.

        Args:
            messages: Chat messages (system prompt and user prompt)

        Returns:
            Parsed review

        Raises:
            CompletionAPIError: If the API call fails
            ReviewParseError: If the answer is not a valid review object
        """
        api_logger.logger.info("Requesting translation review...")

        response = self._make_api_request({"messages": messages})

        usage = TokenUsage.from_response(response)
        self.token_usage.append(usage)
        api_logger.logger.info("OpenAI usage statistics", extra=usage.to_dict())

        return self.parse_review(response)

    def _make_api_request(self, request_data: Dict[str, Any]) -> Dict[str, Any]:
        """Make API request with retry logic."""

        @retry_with_backoff(self.retry_config)
        def _request() -> Dict[str, Any]:
            api_logger.log_request("azure_openai", "POST", self.url, self.headers, request_data)
            try:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, json=request_data, headers=self.headers)
                    response.raise_for_status()
                    return response.json()

            except httpx.TimeoutException as e:
                raise CompletionAPIError(f"Request timeout after {self.timeout}s", deployment=self.deployment) from e
            except httpx.HTTPStatusError as e:
                error_msg = f"HTTP error: {e.response.status_code}"
                try:
                    detail = e.response.json().get("error", {}).get("message")
                except (ValueError, AttributeError):
                    detail = e.response.text
                if detail:
                    error_msg += f" - {detail}"
                api_logger.log_error("azure_openai", "POST", self.url, e, status_code=e.response.status_code)
                raise CompletionAPIError(
                    error_msg,
                    status_code=e.response.status_code,
                    deployment=self.deployment
                ) from e
            except httpx.RequestError as e:
                raise CompletionAPIError(f"Request failed: {e}", deployment=self.deployment) from e

        return _request()

    @staticmethod
    def parse_review(response: Dict[str, Any]) -> ReviewResult:
        """
        Extract the review from a chat completions response.

        Raises:
            ReviewParseError: If the response has no content or the content
                is not a JSON review object
        """
        choices = response.get("choices") or []
        if not choices:
            raise ReviewParseError("Invalid response format: missing choices")

        content = (choices[0].get("message") or {}).get("content") or ""
        if not content.strip():
            raise ReviewParseError("Invalid response format: missing content")

        fenced = CODE_FENCE_PATTERN.match(content)
        if fenced:
            content = fenced.group(1)

        try:
            return ReviewResult.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            api_logger.logger.error("Failed to parse review", extra={"error_message": str(e)})
            raise ReviewParseError(f"Failed to parse review: {e}", raw_content=content) from e

    def get_token_usage_stats(self) -> Dict[str, Any]:
        """Aggregate token usage over all calls made by this client."""
        if not self.token_usage:
            return {"total_requests": 0, "total_tokens": 0}

        return {
            "total_requests": len(self.token_usage),
            "total_tokens": sum(usage.total_tokens for usage in self.token_usage),
            "prompt_tokens_total": sum(usage.prompt_tokens for usage in self.token_usage),
            "completion_tokens_total": sum(usage.completion_tokens for usage in self.token_usage)
        }

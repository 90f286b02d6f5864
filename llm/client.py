"""
Chat-completions client for the categorization gateway.
Uses direct REST calls to an OpenAI-compatible endpoint (Groq by default).
"""
import json
from typing import Any, Dict, List, Optional

import requests
import urllib3
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config import get_settings
from core.exceptions import ConfigurationError, LLMError
from core.logger import setup_logger

logger = setup_logger(__name__)


class ChatClientWrapper:
    """Wrapper for an OpenAI-compatible chat completions REST API."""

    def __init__(self):
        """Initialize REST API client."""
        settings = get_settings()
        if not settings.llm_api_key:
            raise ConfigurationError(
                "LLM_API_KEY environment variable not set",
                details={"required_key": "LLM_API_KEY"}
            )

        self.gateway_url = settings.llm_gateway_url
        self.api_key = settings.llm_api_key
        self.model = settings.llm_model
        self.timeout = settings.llm_timeout
        self.verify_ssl = settings.llm_verify_ssl

        if not self.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.info(f"Initialized chat client with model: {self.model}, gateway: {self.gateway_url}")

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type((requests.exceptions.ConnectionError,)),
        reraise=True
    )
    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        response = requests.post(
            self.gateway_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}"
            },
            data=json.dumps(payload),
            verify=self.verify_ssl,
            timeout=self.timeout
        )
        response.raise_for_status()
        return response

    def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.3,
        max_tokens: int = 10,
    ) -> str:
        """
        Call the chat completions API and return the assistant text.

        Args:
            messages: Chat messages (role/content dicts)
            temperature: Model temperature (0.0-1.0)
            max_tokens: Completion token limit

        Returns:
            Assistant message content, stripped

        Raises:
            LLMError: If the call fails or the reply has no content
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            response = self._post(payload)
            completion_data = response.json()
        except requests.exceptions.Timeout as e:
            raise LLMError(
                f"Gateway request timeout after {self.timeout}s",
                details={"gateway_url": self.gateway_url, "timeout": self.timeout, "error": str(e)}
            )
        except requests.exceptions.HTTPError as e:
            raise LLMError(
                f"Gateway returned HTTP error: {e}",
                details={
                    "gateway_url": self.gateway_url,
                    "status_code": getattr(e.response, "status_code", None),
                }
            )
        except ValueError as e:
            raise LLMError(
                f"Gateway returned invalid JSON: {e}",
                details={"gateway_url": self.gateway_url}
            )
        except requests.exceptions.RequestException as e:
            raise LLMError(
                f"Failed to connect to gateway: {str(e)}",
                details={"gateway_url": self.gateway_url, "error": str(e)}
            )

        content = extract_content(completion_data)
        if not content:
            keys = list(completion_data.keys()) if isinstance(completion_data, dict) else []
            raise LLMError(
                "Unexpected response structure: no assistant content",
                details={"response_keys": keys}
            )

        if isinstance(completion_data, dict) and "usage" in completion_data:
            usage = completion_data["usage"] or {}
            logger.debug(
                f"Token usage - Input: {usage.get('prompt_tokens', 'N/A')}, "
                f"Output: {usage.get('completion_tokens', 'N/A')}"
            )

        return content.strip()


def extract_content(completion_data: Any) -> Optional[str]:
    """
    Pull the assistant text out of a completion body.
    Supports the "choices" shape and the responses-style "output" list.
    """
    if not isinstance(completion_data, dict):
        return None

    if "choices" in completion_data:
        try:
            content = completion_data["choices"][0]["message"]["content"]
            if isinstance(content, str):
                return content
        except (KeyError, IndexError, TypeError):
            pass

    for item in completion_data.get("output") or []:
        if item.get("type") == "message" and item.get("role") == "assistant":
            for content_item in item.get("content", []):
                if content_item.get("type") == "output_text":
                    return content_item.get("text")

    return None


# Singleton client instance
_client: Optional[ChatClientWrapper] = None


def get_client() -> ChatClientWrapper:
    """
    Get or create chat client singleton.

    Returns:
        Chat client wrapper instance
    """
    global _client
    if _client is None:
        _client = ChatClientWrapper()
    return _client


def reset_client() -> None:
    """Drop the cached client (useful for testing)."""
    global _client
    _client = None

"""Text-generation providers (Claude, OpenAI) behind a single client.

Providers only shape requests and unpack replies; ``TextGenerationClient``
owns the HTTP transport. A call is a single attempt with a bounded timeout.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_MAX_TOKENS, DEFAULT_SYSTEM_PROMPT, REQUEST_TIMEOUT, RunSettings
from .prompts import CLASSIFIER_SYSTEM_PROMPT, SUMMARY_INSTRUCTIONS

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Base class for failures talking to a text-generation provider."""


class TransportError(GenerationError):
    """The request never produced an HTTP response (network, timeout)."""


class AuthorizationError(GenerationError):
    """The provider rejected the credentials."""


class ProviderResponseError(GenerationError):
    """The provider answered with an error status or an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class TextGenerationProvider:
    """Base class describing one provider's wire format."""

    name = ""
    url = ""
    default_model = ""
    classification_model = ""

    def headers(self, api_key: str) -> Dict[str, str]:
        raise NotImplementedError

    def build_request(
        self,
        content: str,
        system_prompt: str,
        max_tokens: int,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        raise NotImplementedError

    def parse_reply(self, payload: Dict[str, Any]) -> str:
        raise NotImplementedError


class ClaudeProvider(TextGenerationProvider):
    """Anthropic Messages API."""

    name = "claude"
    url = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-opus-20240229"
    classification_model = "claude-3-haiku-20240307"

    def headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
            "x-api-key": api_key,
        }

    def build_request(self, content, system_prompt, max_tokens, model=None):
        return {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "system": system_prompt or DEFAULT_SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": content}],
        }

    def parse_reply(self, payload):
        return payload["content"][0]["text"]


class OpenAIProvider(TextGenerationProvider):
    """OpenAI Chat Completions API."""

    name = "openai"
    url = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-4-turbo"
    classification_model = "gpt-4o"

    def headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def build_request(self, content, system_prompt, max_tokens, model=None):
        return {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": content},
            ],
        }

    def parse_reply(self, payload):
        return payload["choices"][0]["message"]["content"]


PROVIDERS: Dict[str, TextGenerationProvider] = {
    ClaudeProvider.name: ClaudeProvider(),
    OpenAIProvider.name: OpenAIProvider(),
}


def get_provider(name: str) -> TextGenerationProvider:
    provider = PROVIDERS.get(name.lower())
    if provider is None:
        raise ValueError(
            f"Unsupported provider '{name}'. Supported providers: {', '.join(PROVIDERS)}"
        )
    return provider


def build_summary_content(packed_content: str) -> str:
    """Combine the summary instructions with the packed repository."""
    return f"{SUMMARY_INSTRUCTIONS}\n\nHere's the codebase:\n\n{packed_content}"


class TextGenerationClient:
    """Synchronous prompt-in, text-out client for one provider."""

    def __init__(
        self,
        provider: TextGenerationProvider,
        api_key: str,
        model: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def _post(self, body: Dict[str, Any]) -> str:
        logger.debug("POST %s (model=%s)", self.provider.url, body.get("model"))
        try:
            response = requests.post(
                self.provider.url,
                json=body,
                headers=self.provider.headers(self.api_key),
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise TransportError(f"Request to {self.provider.name} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise TransportError(f"No response received from {self.provider.name} API: {exc}") from exc

        if response.status_code in (401, 403):
            raise AuthorizationError(
                f"HTTP Error {response.status_code}: {self.provider.name} rejected the API key"
            )
        if response.status_code >= 400:
            raise ProviderResponseError(
                f"HTTP Error {response.status_code}: {response.reason}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            return self.provider.parse_reply(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderResponseError(
                f"Unexpected response shape from {self.provider.name}: {exc}",
                status_code=response.status_code,
                details=response.text,
            ) from exc

    def generate(self, content: str, system_prompt: str = "", max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        """Send ``content`` with ``system_prompt`` and return the raw reply text."""
        body = self.provider.build_request(content, system_prompt, max_tokens, model=self.model)
        return self._post(body)

    def classify(self, prompt: str) -> str:
        """Send a classification prompt using the provider's classification model."""
        body = self.provider.build_request(
            prompt,
            CLASSIFIER_SYSTEM_PROMPT,
            DEFAULT_MAX_TOKENS,
            model=self.model or self.provider.classification_model,
        )
        return self._post(body)


def create_client(settings: RunSettings) -> TextGenerationClient:
    """Create a client from per-invocation settings.

    Raises:
        ValueError: Unknown provider or missing API key
    """
    provider = get_provider(settings.provider)
    api_key = settings.resolved_api_key()
    if not api_key:
        raise ValueError(
            f"No API key provided for {provider.name}. Use --api-key or set "
            f"{provider.name.upper()}_API_KEY."
        )
    return TextGenerationClient(provider, api_key, model=settings.model, timeout=settings.timeout)

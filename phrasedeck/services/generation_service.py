"""
Generation Service - structured phrase generation over HTTP.

Provides:
- Provider abstraction over structured-output LLM endpoints (Gemini, OpenAI)
- GenerationClient: one logical request per batch, retried with
  exponential backoff (5 attempts, 1s/2s/4s/8s) before a terminal
  GenerationError
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

from ..config import Config
from ..errors import GenerationError, MalformedResponseError, TransportError
from ..models import GenerationRequest, Phrase
from ..templates import PHRASE_SCHEMA, PromptTemplates, to_json_schema
from ..utils.parsing import TextParser


class AIProvider(Enum):
    """Supported generation providers."""
    GEMINI = "gemini"
    OPENAI = "openai"


@dataclass
class AIConfig:
    """Configuration for a generation provider."""
    provider: AIProvider = AIProvider.GEMINI
    model: str = Config.GEMINI_MODEL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.9
    timeout: int = Config.TIMEOUT


class BaseAIProvider(ABC):
    """Abstract base class for structured-output providers."""

    def __init__(self, config: AIConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        POST a JSON payload and decode the JSON response.

        Raises:
            TransportError: Connection failure, timeout or non-200 status
            MalformedResponseError: Body is not JSON
        """
        session = await self._get_session()
        name = self.config.provider.value
        try:
            async with session.post(url, headers=headers, json=payload) as response:
                if response.status != 200:
                    error = await response.text()
                    raise TransportError(
                        f"{name} API error {response.status}: {error[:200]}",
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(f"{name} API returned a non-JSON body") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"{name} API timeout") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{name} API connection failed: {e}") from e

    @abstractmethod
    async def complete_structured(self, prompt: str, schema: Dict[str, Any]) -> str:
        """
        Ask the endpoint for output conforming to ``schema``.

        Returns:
            The raw JSON text of the structured payload
        """
        pass


class GeminiProvider(BaseAIProvider):
    """Google Gemini generateContent with responseSchema."""

    DEFAULT_BASE_URL = Config.GEMINI_API_URL

    async def complete_structured(self, prompt: str, schema: Dict[str, Any]) -> str:
        """Generate structured content using the Gemini API."""
        base_url = self.config.base_url or self.DEFAULT_BASE_URL
        url = f"{base_url}/models/{self.config.model}:generateContent"

        headers = {
            "x-goog-api-key": self.config.api_key or "",
            "Content-Type": "application/json",
        }

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
                "temperature": self.config.temperature,
            },
        }

        data = await self._post_json(url, payload, headers)
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("API response format is not as expected.") from e
        if not isinstance(text, str):
            raise MalformedResponseError("API response payload is not text")
        return text


class OpenAIProvider(BaseAIProvider):
    """OpenAI chat completions with a strict json_schema response format."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    # The json_schema response format needs an object root
    WRAPPER_KEY = "phrases"

    async def complete_structured(self, prompt: str, schema: Dict[str, Any]) -> str:
        """Generate structured content using the OpenAI API."""
        base_url = self.config.base_url or self.DEFAULT_BASE_URL
        url = f"{base_url}/chat/completions"

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": PromptTemplates.SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "phrase_batch",
                    "strict": True,
                    "schema": {
                        "type": "object",
                        "properties": {self.WRAPPER_KEY: to_json_schema(schema)},
                        "required": [self.WRAPPER_KEY],
                        "additionalProperties": False,
                    },
                },
            },
        }

        data = await self._post_json(url, payload, headers)
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("API response format is not as expected.") from e
        if not isinstance(text, str):
            raise MalformedResponseError("API response payload is not text")
        return text


def parse_phrase_batch(raw: str, request: GenerationRequest, count: int) -> List[Phrase]:
    """
    Parse the endpoint payload into exactly ``count`` phrases.

    Accepts a bare JSON array or an object wrapping it under "phrases".
    Extra items are dropped; fewer than ``count`` is a malformed response.

    Raises:
        MalformedResponseError: On any parse or shape failure
    """
    try:
        data = json.loads(TextParser.extract_json_text(raw))
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Payload is not valid JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get(OpenAIProvider.WRAPPER_KEY), list):
        data = data[OpenAIProvider.WRAPPER_KEY]
    if not isinstance(data, list):
        raise MalformedResponseError("Payload is not a JSON array of phrases")
    if len(data) < count:
        raise MalformedResponseError(f"Expected {count} phrases, got {len(data)}")

    return [
        Phrase.from_dict(
            item,
            require_native_phonetics=not request.native_language.uses_latin_alphabet,
            require_learning_phonetics=not request.learning_language.uses_latin_alphabet,
        )
        for item in data[:count]
    ]


@dataclass
class BackoffState:
    """
    Retry bookkeeping for one generate() call.

    Each failure advances the attempt counter and hands back the delay to wait
    before the next attempt, or None once the budget is spent.
    """
    max_attempts: int
    next_delay: float
    attempt: int = 0

    def record_failure(self) -> Optional[float]:
        self.attempt += 1
        if self.exhausted:
            return None
        delay = self.next_delay
        self.next_delay *= 2
        return delay

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


class GenerationClient:
    """
    Requests phrase batches and retries transient failures.

    Transport failures and malformed payloads share one retry budget. The
    client never touches deck or cooldown state; callers must not run two
    generate() calls for the same session concurrently.
    """

    def __init__(
        self,
        provider: BaseAIProvider,
        max_attempts: int = Config.RETRIES,
        base_delay_ms: int = Config.BASE_BACKOFF_MS,
        phrase_count: int = Config.PHRASE_COUNT,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the client.

        Args:
            provider: Endpoint adapter
            max_attempts: Total attempts before giving up
            base_delay_ms: First backoff delay, doubled after each failure
            phrase_count: Phrases requested per batch
            sleep: Awaitable used for backoff waits (injectable for tests)
        """
        self.provider = provider
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.phrase_count = phrase_count
        self._sleep = sleep

    async def close(self) -> None:
        """Release the provider's HTTP session."""
        await self.provider.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def generate(
        self,
        request: GenerationRequest,
        schema: Optional[Dict[str, Any]] = None,
    ) -> List[Phrase]:
        """
        Generate one batch of phrases.

        Args:
            request: Languages, topic and phrases to avoid
            schema: Response schema (defaults to PHRASE_SCHEMA)

        Returns:
            List of exactly ``phrase_count`` phrases

        Raises:
            GenerationError: After the last attempt fails; ``last_error``
                holds the final TransportError or MalformedResponseError
        """
        schema = schema or PHRASE_SCHEMA
        prompt = PromptTemplates.build_generation_prompt(request, self.phrase_count)
        backoff = BackoffState(max_attempts=self.max_attempts, next_delay=self.base_delay_ms / 1000.0)

        while True:
            try:
                raw = await self.provider.complete_structured(prompt, schema)
                return parse_phrase_batch(raw, request, self.phrase_count)
            except (TransportError, MalformedResponseError) as e:
                last_error = e

            delay = backoff.record_failure()
            print(f"  [!] Generation attempt {backoff.attempt}/{self.max_attempts} failed: {str(last_error)[:80]}")
            if delay is None:
                raise GenerationError(
                    f"Phrase generation failed after {backoff.attempt} attempts: {last_error}",
                    last_error=last_error,
                    attempts=backoff.attempt,
                ) from last_error
            await self._sleep(delay)


_PROVIDER_CLASSES = {
    AIProvider.GEMINI: GeminiProvider,
    AIProvider.OPENAI: OpenAIProvider,
}

_MODEL_DEFAULTS = {
    AIProvider.GEMINI: Config.GEMINI_MODEL,
    AIProvider.OPENAI: Config.OPENAI_MODEL,
}


def create_provider(config: AIConfig) -> BaseAIProvider:
    """Instantiate the provider class for ``config.provider``."""
    provider_class = _PROVIDER_CLASSES.get(config.provider, GeminiProvider)
    return provider_class(config)


def create_generation_client(
    provider: str = "gemini",
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: int = Config.TIMEOUT,
    temperature: float = 0.9,
    **client_kwargs: Any,
) -> GenerationClient:
    """
    Create a generation client with specified configuration.

    Args:
        provider: Provider name (gemini, openai)
        model: Model name (uses default if None)
        api_key: API key (uses environment if None)
        timeout: Per-request HTTP timeout in seconds
        temperature: Sampling temperature
        **client_kwargs: Passed through to GenerationClient

    Returns:
        Configured GenerationClient
    """
    provider_enum = {
        "gemini": AIProvider.GEMINI,
        "openai": AIProvider.OPENAI,
    }.get(provider.lower(), AIProvider.GEMINI)

    if api_key is None:
        api_key = Config.GEMINI_API_KEY if provider_enum is AIProvider.GEMINI else os.environ.get("OPENAI_API_KEY", "")

    config = AIConfig(
        provider=provider_enum,
        model=model or _MODEL_DEFAULTS[provider_enum],
        api_key=api_key,
        temperature=temperature,
        timeout=timeout,
    )
    return GenerationClient(create_provider(config), **client_kwargs)

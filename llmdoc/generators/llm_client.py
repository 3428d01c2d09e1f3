"""LLM provider clients for documentation generation.

Wraps the Anthropic, OpenAI and Google GenAI SDKs behind one
interface: a system prompt plus a user message carrying the rendered
source files goes in, Markdown text comes out. Provider errors and
unusable response shapes surface as GenerationError. Calls are not
retried.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import anthropic
import httpx
import openai
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from llmdoc.generators.template_manager import TemplateManager
from llmdoc.utils.config import ConfigError, LLMConfig

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google-genai": "GOOGLE_API_KEY",
}

DEFAULT_TEMPERATURE = 0.3
DEFAULT_ANTHROPIC_MAX_TOKENS = 4096


class GenerationError(RuntimeError):
    """Raised when a generation call fails or returns an unusable response."""


@dataclass
class TokenUsage:
    """Token usage reported by the provider.

    Attributes:
        input_tokens: Number of tokens in the prompt.
        output_tokens: Number of tokens in the response.
    """

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed."""
        return self.input_tokens + self.output_tokens


def get_api_key(config: LLMConfig) -> str:
    """Return the API key from the config or the provider's env variable.

    Args:
        config: LLM configuration.

    Returns:
        The API key.

    Raises:
        ConfigError: If neither the config nor the environment has a key.
    """
    if config.api_key:
        return config.api_key

    env_var = API_KEY_ENV_VARS.get(config.provider, "")
    env_key = os.getenv(env_var) if env_var else None
    if not env_key:
        raise ConfigError(
            f"No API key provided for {config.provider}. "
            f"Set {env_var} environment variable or provide api_key in config."
        )
    return env_key


def flatten_content(content: Any) -> str:
    """Convert a provider response payload to plain text.

    Strings pass through. Lists of content blocks are joined, using the
    text of each text-bearing block; other blocks contribute nothing.

    Args:
        content: The response payload.

    Returns:
        The response text.

    Raises:
        GenerationError: If the payload is neither a string nor a list.
    """
    if isinstance(content, str):
        return content

    if isinstance(content, (list, tuple)):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict):
                parts.append(str(block.get("text") or ""))
            else:
                text = getattr(block, "text", None)
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts)

    raise GenerationError("Unexpected response format from LLM")


class LLMClient:
    """Base class for provider clients.

    Subclasses create the SDK client and implement ``_complete``; this
    class builds the messages, maps SDK errors to GenerationError and
    tracks token usage.
    """

    provider = ""
    provider_errors: tuple[type[Exception], ...] = ()

    def __init__(
        self,
        config: LLMConfig,
        templates: Optional[TemplateManager] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: LLM configuration.
            templates: Template manager for prompts. Uses the package
                templates if not provided.

        Raises:
            ConfigError: If no API key is available.
        """
        self.config = config
        self.templates = templates or TemplateManager()
        self._api_key = get_api_key(config)
        self._client = self._create_client()
        self._total_usage = TokenUsage()

    @property
    def temperature(self) -> float:
        """Sampling temperature, defaulting to a low value."""
        if self.config.temperature is None:
            return DEFAULT_TEMPERATURE
        return self.config.temperature

    @property
    def total_usage(self) -> TokenUsage:
        """Cumulative token usage across all calls."""
        return self._total_usage

    def generate_documentation(
        self,
        system_prompt: str,
        files_content: str,
        existing_docs: Optional[str] = None,
    ) -> str:
        """Generate documentation from rendered source files.

        Args:
            system_prompt: Instructions for the model.
            files_content: Source files rendered for the LLM.
            existing_docs: Current documentation to update, if any.

        Returns:
            The generated Markdown.

        Raises:
            GenerationError: If the provider call fails or the response
                has an unexpected shape.
        """
        logger.debug("Generating documentation with %s...", self.provider)
        user_content = self.templates.render_user_message(files_content, existing_docs)

        try:
            content = self._complete(system_prompt, user_content)
        except self.provider_errors as e:
            raise GenerationError(f"LLM generation failed: {e}") from e

        text = flatten_content(content)
        logger.info(
            "Generated %d characters (total tokens so far: %d)",
            len(text),
            self._total_usage.total_tokens,
        )
        return text

    def generate_readme(
        self,
        system_prompt: str,
        files_content: str,
        project_name: str,
        existing_readme: Optional[str] = None,
    ) -> str:
        """Generate or update the project README.

        Args:
            system_prompt: Base documentation prompt.
            files_content: All project files rendered for the LLM.
            project_name: Name of the project.
            existing_readme: Current README content, if any.

        Returns:
            The generated README Markdown.
        """
        readme_prompt = self.templates.render_readme_prompt(
            system_prompt, project_name, has_existing=existing_readme is not None
        )
        return self.generate_documentation(readme_prompt, files_content, existing_readme)

    def generate_api_reference(
        self,
        system_prompt: str,
        files_content: str,
        existing_docs: Optional[str] = None,
    ) -> str:
        """Generate API reference documentation for ungrouped files."""
        api_prompt = self.templates.render_api_reference_prompt(system_prompt)
        return self.generate_documentation(api_prompt, files_content, existing_docs)

    def _record_usage(self, input_tokens: Optional[int], output_tokens: Optional[int]) -> None:
        self._total_usage.input_tokens += input_tokens or 0
        self._total_usage.output_tokens += output_tokens or 0

    def _create_client(self) -> Any:
        raise NotImplementedError

    def _complete(self, system_prompt: str, user_content: str) -> Any:
        """Send one request and return the raw response content."""
        raise NotImplementedError


class AnthropicClient(LLMClient):
    """Client for the Anthropic Messages API."""

    provider = "anthropic"
    provider_errors = (anthropic.APIError,)

    def _create_client(self) -> anthropic.Anthropic:
        return anthropic.Anthropic(api_key=self._api_key, base_url=self.config.base_url)

    def _complete(self, system_prompt: str, user_content: str) -> Any:
        response = self._client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens or DEFAULT_ANTHROPIC_MAX_TOKENS,
            temperature=self.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_content}],
        )
        if response.usage is not None:
            self._record_usage(response.usage.input_tokens, response.usage.output_tokens)
        return response.content


class OpenAIClient(LLMClient):
    """Client for the OpenAI Chat Completions API."""

    provider = "openai"
    provider_errors = (openai.OpenAIError,)

    def _create_client(self) -> openai.OpenAI:
        return openai.OpenAI(api_key=self._api_key, base_url=self.config.base_url)

    def _complete(self, system_prompt: str, user_content: str) -> Any:
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
        }
        if self.config.max_tokens:
            kwargs["max_tokens"] = self.config.max_tokens

        response = self._client.chat.completions.create(**kwargs)
        if response.usage is not None:
            self._record_usage(
                response.usage.prompt_tokens, response.usage.completion_tokens
            )
        if not response.choices:
            raise GenerationError("LLM returned no choices")
        return response.choices[0].message.content


class GoogleClient(LLMClient):
    """Client for the Google Gemini API."""

    provider = "google-genai"
    provider_errors = (genai_errors.APIError, httpx.HTTPError)

    def _create_client(self) -> genai.Client:
        http_options = None
        if self.config.base_url:
            http_options = genai_types.HttpOptions(base_url=self.config.base_url)
        return genai.Client(api_key=self._api_key, http_options=http_options)

    def _complete(self, system_prompt: str, user_content: str) -> Any:
        response = self._client.models.generate_content(
            model=self.config.model,
            contents=user_content,
            config=genai_types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self.temperature,
                max_output_tokens=self.config.max_tokens,
            ),
        )
        usage = response.usage_metadata
        if usage is not None:
            self._record_usage(usage.prompt_token_count, usage.candidates_token_count)
        return response.text


_CLIENTS: dict[str, type[LLMClient]] = {
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "google-genai": GoogleClient,
}


def create_llm_client(
    config: LLMConfig, templates: Optional[TemplateManager] = None
) -> LLMClient:
    """Create the client for the configured provider.

    Args:
        config: LLM configuration.
        templates: Template manager for prompts.

    Returns:
        A ready-to-use provider client.

    Raises:
        ConfigError: If the provider is unsupported or no API key is set.
    """
    client_cls = _CLIENTS.get(config.provider)
    if client_cls is None:
        raise ConfigError(f"Unsupported LLM provider: {config.provider}")
    logger.debug("Creating LLM client: %s/%s", config.provider, config.model)
    return client_cls(config, templates=templates)

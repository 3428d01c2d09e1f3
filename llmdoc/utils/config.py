"""Configuration loader and validator for llmdoc.

Loads ``llmdoc.config.yaml`` (or ``.yml`` / ``.json``) from the project
root and provides typed access to every section via dataclasses.
Missing optional values fall back to documented defaults; anything
malformed raises ConfigError before any generation starts.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlparse

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILES = ("llmdoc.config.yaml", "llmdoc.config.yml", "llmdoc.config.json")

PROVIDERS = ("openai", "anthropic", "google-genai")

MAX_IMPORT_DEPTH = 5

DEFAULT_INCLUDE = ["**/*.ts", "**/*.tsx"]
DEFAULT_EXCLUDE = [
    "node_modules/**",
    "dist/**",
    "build/**",
    "**/*.test.ts",
    "**/*.spec.ts",
    "**/*.test.tsx",
    "**/*.spec.tsx",
    "**/*.d.ts",
]
DEFAULT_OUTPUT_DIR = "docs/"
DEFAULT_PROMPT = """\
You are a technical documentation expert. Analyze the following source files \
and generate comprehensive markdown documentation.

Include:
- Overview of the module/file purpose
- Exported functions, classes, and interfaces with descriptions
- Parameters and return types explained
- Usage examples where appropriate
- Any important notes or caveats

Format the documentation in clean, readable markdown with proper headings \
and code blocks."""


class ConfigError(ValueError):
    """Raised when configuration is missing or invalid."""


@dataclass
class LLMConfig:
    """Configuration for the LLM provider."""

    provider: str = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class SubfolderConfig:
    """A subfolder that gets its own documentation file.

    Attributes:
        path: Subfolder path relative to the project root. Unique.
        prompt: Prompt override for this subfolder.
        output_path: Where to write the docs. Defaults to
            ``<path>/README.md``.
        existing_docs: Existing documentation to update. Defaults to
            the output file when it exists.
        include_imports: Follow imports of the subfolder files for context.
        import_depth: Maximum import hops to follow (0-5).
        additional_files: Extra glob patterns to include as context.
    """

    path: str
    prompt: Optional[str] = None
    output_path: Optional[str] = None
    existing_docs: Optional[str] = None
    include_imports: bool = True
    import_depth: int = 2
    additional_files: list[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level application configuration."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    prompt: str = DEFAULT_PROMPT
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    subfolders: list[SubfolderConfig] = field(default_factory=list)
    output_dir: str = DEFAULT_OUTPUT_DIR
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def output_dir_path(self) -> str:
        """Output directory without a trailing slash."""
        return self.output_dir.rstrip("/\\") or "."


def _optional_str(data: dict, key: str, section: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"Invalid config: {section}.{key} must be a string")
    return value


def _string_list(data: dict, key: str, section: str) -> Optional[list[str]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Invalid config: {section}.{key} must be a list of strings")
    return value


def _section(raw: dict, key: str) -> dict:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid config: {key} must be a mapping")
    return value


def _build_llm_config(data: dict) -> LLMConfig:
    """Build and validate an LLMConfig from a dictionary.

    Args:
        data: The ``llm`` section of the config file.

    Returns:
        A validated LLMConfig instance.

    Raises:
        ConfigError: If a field is missing or out of range.
    """
    provider = data.get("provider")
    if provider not in PROVIDERS:
        raise ConfigError(
            f"Invalid config: llm.provider must be one of {', '.join(PROVIDERS)}, "
            f"got {provider!r}"
        )

    model = data.get("model")
    if not isinstance(model, str) or not model.strip():
        raise ConfigError("Invalid config: llm.model is required")

    temperature = data.get("temperature")
    if temperature is not None:
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
            raise ConfigError("Invalid config: llm.temperature must be a number")
        if not 0 <= temperature <= 2:
            raise ConfigError("Invalid config: llm.temperature must be between 0 and 2")

    max_tokens = data.get("max_tokens")
    if max_tokens is not None and (
        isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0
    ):
        raise ConfigError("Invalid config: llm.max_tokens must be a positive integer")

    base_url = _optional_str(data, "base_url", "llm")
    if base_url is not None:
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"Invalid config: llm.base_url is not a URL: {base_url}")

    return LLMConfig(
        provider=provider,
        model=model,
        api_key=_optional_str(data, "api_key", "llm"),
        base_url=base_url,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def _build_subfolder_config(data: Any, index: int) -> SubfolderConfig:
    """Build and validate a SubfolderConfig from a dictionary.

    Args:
        data: One entry of the ``subfolders`` list.
        index: Position of the entry, for error messages.

    Returns:
        A validated SubfolderConfig instance.

    Raises:
        ConfigError: If a field is missing or out of range.
    """
    section = f"subfolders[{index}]"
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config: {section} must be a mapping")

    path = data.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ConfigError(f"Invalid config: {section}.path is required")

    include_imports = data.get("include_imports", True)
    if not isinstance(include_imports, bool):
        raise ConfigError(f"Invalid config: {section}.include_imports must be a boolean")

    import_depth = data.get("import_depth", 2)
    if (
        isinstance(import_depth, bool)
        or not isinstance(import_depth, int)
        or not 0 <= import_depth <= MAX_IMPORT_DEPTH
    ):
        raise ConfigError(
            f"Invalid config: {section}.import_depth must be an integer "
            f"between 0 and {MAX_IMPORT_DEPTH}"
        )

    return SubfolderConfig(
        path=path,
        prompt=_optional_str(data, "prompt", section),
        output_path=_optional_str(data, "output_path", section),
        existing_docs=_optional_str(data, "existing_docs", section),
        include_imports=include_imports,
        import_depth=import_depth,
        additional_files=_string_list(data, "additional_files", section) or [],
    )


def _build_logging_config(data: dict) -> LoggingConfig:
    defaults = LoggingConfig()
    return LoggingConfig(
        level=data.get("level", defaults.level),
        format=data.get("format", defaults.format),
        file=data.get("file"),
    )


def validate_config(raw: Any) -> AppConfig:
    """Validate raw config data and merge it with defaults.

    Args:
        raw: Parsed YAML or JSON document.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If the document does not match the expected schema.
    """
    if not isinstance(raw, dict):
        raise ConfigError("Invalid config: top level must be a mapping")
    if "llm" not in raw:
        raise ConfigError("Invalid config: llm section is required")

    subfolders_raw = raw.get("subfolders") or []
    if not isinstance(subfolders_raw, list):
        raise ConfigError("Invalid config: subfolders must be a list")
    subfolders = [
        _build_subfolder_config(entry, i) for i, entry in enumerate(subfolders_raw)
    ]

    seen: set[str] = set()
    for subfolder in subfolders:
        if subfolder.path in seen:
            raise ConfigError(
                f"Invalid config: duplicate subfolder path {subfolder.path!r}"
            )
        seen.add(subfolder.path)

    prompt = _optional_str(raw, "prompt", "config")
    output_dir = _optional_str(raw, "output_dir", "config")
    include = _string_list(raw, "include", "config")
    exclude = _string_list(raw, "exclude", "config")

    return AppConfig(
        llm=_build_llm_config(_section(raw, "llm")),
        prompt=prompt or DEFAULT_PROMPT,
        include=include if include is not None else list(DEFAULT_INCLUDE),
        exclude=exclude if exclude is not None else list(DEFAULT_EXCLUDE),
        subfolders=subfolders,
        output_dir=output_dir or DEFAULT_OUTPUT_DIR,
        logging=_build_logging_config(_section(raw, "logging")),
    )


def find_config_file(
    root_dir: Union[str, Path], custom_path: Optional[str] = None
) -> Optional[Path]:
    """Locate the config file for a project.

    Args:
        root_dir: Project root directory.
        custom_path: Explicit config path, relative to the root.

    Returns:
        Path to the config file, or None if none exists.
    """
    root = Path(root_dir)
    names = [custom_path] if custom_path else list(CONFIG_FILES)
    for name in names:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    root_dir: Union[str, Path] = ".", config_path: Optional[str] = None
) -> AppConfig:
    """Load and validate the project configuration.

    Args:
        root_dir: Project root directory.
        config_path: Explicit config file path, relative to the root.
            If None, the default config file names are searched.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If no config file is found, it cannot be parsed, or
            it fails validation.
    """
    path = find_config_file(root_dir, config_path)
    if path is None:
        searched = [config_path] if config_path else list(CONFIG_FILES)
        raise ConfigError(
            f"No config file found. Searched for: {', '.join(searched)}. "
            "Run 'llmdoc init' to create one."
        )

    logger.debug("Loading config from: %s", path)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config file: {e}") from e

    config = validate_config(raw)
    logger.info("Loaded configuration from %s", path)
    return config

"""Template manager for loading and rendering Jinja2 prompt templates.

Provides a centralized interface for rendering LLM prompts and the
sample configuration file from the templates shipped in the package.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader

from llmdoc.utils.config import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_OUTPUT_DIR,
)

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class TemplateManager:
    """Loads and renders Jinja2 templates for prompts and config files."""

    def __init__(self, templates_dir: Optional[str] = None) -> None:
        """Initialize the template manager.

        Args:
            templates_dir: Path to the templates directory. Uses the
                package templates directory if not specified.
        """
        self._templates_path = (
            Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR
        )

        if not self._templates_path.exists():
            logger.warning("Templates directory not found: %s", self._templates_path)

        self._env = Environment(
            loader=FileSystemLoader(str(self._templates_path)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.debug("Template manager initialized with: %s", self._templates_path)

    def render_user_message(
        self, files_content: str, existing_docs: Optional[str] = None
    ) -> str:
        """Render the user message carrying the source files.

        Args:
            files_content: Source files rendered for the LLM.
            existing_docs: Current documentation to update, if any.

        Returns:
            The user message text.
        """
        return self._render(
            "user_message.j2",
            files_content=files_content,
            existing_docs=existing_docs,
        )

    def render_readme_prompt(
        self, system_prompt: str, project_name: str, has_existing: bool = False
    ) -> str:
        """Render the system prompt for whole-project README generation.

        Args:
            system_prompt: Base documentation prompt.
            project_name: Name of the project.
            has_existing: Whether an existing README will be updated.

        Returns:
            The README system prompt.
        """
        return self._render(
            "readme.j2",
            system_prompt=system_prompt,
            project_name=project_name,
            has_existing=has_existing,
        )

    def render_api_reference_prompt(self, system_prompt: str) -> str:
        """Render the system prompt for the ungrouped API reference."""
        return self._render("api_reference.j2", system_prompt=system_prompt)

    def render_sample_config(
        self,
        provider: str = "anthropic",
        model: str = "claude-sonnet-4-20250514",
        env_var: str = "ANTHROPIC_API_KEY",
    ) -> str:
        """Render a sample llmdoc.config.yaml.

        Args:
            provider: LLM provider to preselect.
            model: Model name to preselect.
            env_var: Environment variable holding the provider API key.

        Returns:
            YAML text with the default patterns filled in.
        """
        return self._render(
            "sample_config.yaml.j2",
            provider=provider,
            model=model,
            env_var=env_var,
            include=DEFAULT_INCLUDE,
            exclude=DEFAULT_EXCLUDE,
            output_dir=DEFAULT_OUTPUT_DIR,
        )

    def _render(self, template_name: str, **kwargs: Any) -> str:
        """Render a template with the given context variables.

        Args:
            template_name: Name of the template file to render.
            **kwargs: Template context variables.

        Returns:
            Rendered template string.

        Raises:
            TemplateNotFound: If the template file does not exist.
        """
        template = self._env.get_template(template_name)
        rendered = template.render(**kwargs)
        logger.debug("Rendered template %s (%d chars)", template_name, len(rendered))
        return rendered

    def list_templates(self) -> list[str]:
        """List all available template files."""
        return self._env.list_templates()

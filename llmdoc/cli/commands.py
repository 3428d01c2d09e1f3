"""CLI commands for llmdoc.

Provides the Click-based command group 'llmdoc' with subcommands for
generating documentation, estimating its cost, and creating a sample
configuration file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from llmdoc import __version__
from llmdoc.generators.doc_gen import DocumentationGenerator, GeneratedDoc, Stage
from llmdoc.generators.llm_client import (
    API_KEY_ENV_VARS,
    GenerationError,
    LLMClient,
    create_llm_client,
)
from llmdoc.generators.template_manager import TemplateManager
from llmdoc.scanner.grouping import scan_project
from llmdoc.utils.config import CONFIG_FILES, PROVIDERS, AppConfig, ConfigError, load_config
from llmdoc.utils.logging import configure_logging
from llmdoc.utils.tokens import format_token_estimate

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "google-genai": "gemini-2.5-flash",
}

_config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=str,
    default=None,
    help=f"Path to config file (default: {CONFIG_FILES[0]}).",
)
_root_option = click.option(
    "-r",
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project root directory (default: current directory).",
)
_verbose_option = click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")


def _load(root_dir: Path, config_path: Optional[str], level: Optional[str]) -> AppConfig:
    """Load the config and configure logging from it.

    Args:
        root_dir: Project root directory.
        config_path: Explicit config file path, relative to the root.
        level: Log level overriding the configured one.

    Returns:
        The loaded configuration.
    """
    config = load_config(root_dir, config_path)
    configure_logging(config.logging, level)
    logger.debug("Root directory: %s", root_dir)
    return config


def run_generation(
    root_dir: Path,
    config: AppConfig,
    dry_run: bool,
) -> Optional[DocumentationGenerator]:
    """Scan the project and generate its documentation.

    Args:
        root_dir: Project root directory.
        config: Loaded configuration.
        dry_run: Preview only, without LLM calls or writes.

    Returns:
        The generator after its run, or None when no files matched.

    Raises:
        ConfigError: If the LLM client cannot be configured.
        GenerationError: If a generation call fails.
    """
    stage = Stage.SCAN
    logger.debug("Stage: %s", stage.value)
    scan_result = scan_project(root_dir, config.include, config.exclude, config.subfolders)
    click.echo(f"Found {len(scan_result.files)} files")

    if not scan_result.files:
        click.echo("No files found to process. Check your include/exclude patterns.")
        return None

    llm: Optional[LLMClient] = None
    if dry_run:
        stage = Stage.DRY_RUN_SKIP
        click.echo("[DRY RUN] Skipping LLM initialization")
    else:
        stage = Stage.LLM_INIT
        click.echo(f"Initializing {config.llm.provider} LLM...")
        llm = create_llm_client(config.llm)
    logger.debug("Stage: %s", stage.value)

    generator = DocumentationGenerator(llm, config, root_dir, dry_run=dry_run)
    generator.generate(scan_result)
    return generator


def _report(docs: list[GeneratedDoc], dry_run: bool) -> None:
    click.echo(f"Generated {len(docs)} documentation file(s)")
    if dry_run:
        click.echo("[DRY RUN] No files were written")
    for doc in docs:
        click.echo(f"  -> {doc.output_path} ({len(doc.source_files)} source files)")


@click.group()
@click.version_option(version=__version__, prog_name="llmdoc")
def cli() -> None:
    """LLMDoc - generate documentation for your project using LLMs."""


@cli.command()
@_config_option
@_root_option
@click.option(
    "-d",
    "--dry-run",
    is_flag=True,
    help="Preview without making LLM calls or writing files.",
)
@_verbose_option
def generate(config_path: Optional[str], root: str, dry_run: bool, verbose: bool) -> None:
    """Generate documentation for the project.

    Writes one document per configured subfolder, an API reference for
    the remaining files, and the project README.
    """
    root_dir = Path(root).resolve()
    try:
        config = _load(root_dir, config_path, "DEBUG" if verbose else None)
        generator = run_generation(root_dir, config, dry_run)
    except (ConfigError, GenerationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if generator is None:
        return

    _report(generator.docs, dry_run)
    click.echo("Documentation generation complete!")


@cli.command()
@_config_option
@_root_option
@_verbose_option
def estimate(config_path: Optional[str], root: str, verbose: bool) -> None:
    """Estimate tokens and API cost without generating documentation."""
    root_dir = Path(root).resolve()
    try:
        config = _load(root_dir, config_path, "DEBUG" if verbose else "WARNING")
        generator = run_generation(root_dir, config, dry_run=True)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if generator is None:
        return

    click.echo(f"Requests: {len(generator.estimates)}")
    click.echo(format_token_estimate(generator.total_estimate, config.llm.model))
    click.echo(f"Model: {config.llm.model}")


@cli.command()
@_root_option
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default="anthropic",
    help="LLM provider to preselect.",
)
@click.option("--model", default=None, help="Model name to preselect.")
def init(root: str, provider: str, model: Optional[str]) -> None:
    """Create a sample llmdoc.config.yaml file."""
    config_file = Path(root) / CONFIG_FILES[0]
    if config_file.exists():
        click.echo(f"Error: {CONFIG_FILES[0]} already exists", err=True)
        sys.exit(1)

    content = TemplateManager().render_sample_config(
        provider=provider,
        model=model or DEFAULT_MODELS[provider],
        env_var=API_KEY_ENV_VARS[provider],
    )
    config_file.write_text(content, encoding="utf-8")
    click.echo(f"Created {config_file}")
    click.echo("Edit the config file to customize your documentation generation")

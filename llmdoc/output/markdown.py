"""Markdown rendering of source files and documentation output.

Renders indexed files into the fenced-code layout sent to the LLM,
summarizes file sets for dry-run previews, and reads and writes the
generated documentation files.
"""

import logging
import posixpath
from pathlib import Path
from typing import Optional, Union

from llmdoc.scanner.models import IndexedFile

logger = logging.getLogger(__name__)

FILE_SEPARATOR = "\n\n---\n\n"

_FENCE_LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "tsx",
    ".mts": "typescript",
    ".cts": "typescript",
    ".js": "javascript",
    ".jsx": "jsx",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".json": "json",
    ".py": "python",
    ".md": "markdown",
}


def _fence_language(path: str) -> str:
    return _FENCE_LANGUAGES.get(posixpath.splitext(path)[1].lower(), "")


def format_files_for_llm(files: list[IndexedFile]) -> str:
    """Render files as headed, fenced code blocks separated by rules.

    Args:
        files: Files to render.

    Returns:
        The rendered text, or ``"No files found."`` for an empty list.
    """
    if not files:
        return "No files found."

    return FILE_SEPARATOR.join(
        f"## File: {f.path}\n\n```{_fence_language(f.path)}\n{f.content}\n```"
        for f in files
    )


def format_files_with_context(
    main_files: list[IndexedFile], context_files: list[IndexedFile]
) -> str:
    """Render main files followed by a delimited context block.

    Args:
        main_files: The files being documented.
        context_files: Imported and additional files given for context.

    Returns:
        The rendered text. Without context files this is the same as
        format_files_for_llm(main_files).
    """
    if not context_files:
        return format_files_for_llm(main_files)

    sections = []
    if main_files:
        sections.append(
            "# Main Source Files\n\n"
            "These are the primary files to document:\n\n"
            + format_files_for_llm(main_files)
        )
    sections.append(
        "# Context Files (Imports & Dependencies)\n\n"
        "These files are imported/used by the main files. Use them for context "
        "to understand types, interfaces, and dependencies:\n\n"
        + format_files_for_llm(context_files)
    )
    return FILE_SEPARATOR.join(sections)


def get_files_summary(files: list[IndexedFile]) -> str:
    """List file paths grouped by directory.

    Args:
        files: Files to summarize.

    Returns:
        An indented listing, or ``"No files found."``.
    """
    if not files:
        return "No files found."

    by_directory: dict[str, list[str]] = {}
    for f in files:
        by_directory.setdefault(f.directory or "(root)", []).append(f.path)

    lines = []
    for directory, paths in by_directory.items():
        lines.append(f"{directory}/")
        lines.extend(f"  - {path}" for path in paths)
    return "\n".join(lines)


class MarkdownWriter:
    """Reads and writes documentation files below a project root."""

    def __init__(self, root_dir: Union[str, Path]) -> None:
        """Initialize the writer.

        Args:
            root_dir: Project root that output paths are relative to.
        """
        self.root_dir = Path(root_dir)

    def read_existing(self, doc_path: str) -> Optional[str]:
        """Read an existing documentation file if there is one.

        Args:
            doc_path: Root-relative path of the document.

        Returns:
            The file content, or None if the file does not exist.
        """
        full_path = self.root_dir / doc_path
        if not full_path.is_file():
            return None
        return full_path.read_text(encoding="utf-8")

    def write(self, output_path: str, content: str) -> Path:
        """Write a documentation file, replacing any previous version.

        Args:
            output_path: Root-relative destination path.
            content: Markdown content.

        Returns:
            The absolute path that was written.
        """
        full_path = self.root_dir / output_path
        if not full_path.parent.exists():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Created directory: %s", full_path.parent)

        full_path.write_text(content, encoding="utf-8")
        logger.info("Written: %s", output_path)
        return full_path

"""File discovery and loading.

Expands include/exclude glob patterns against a project tree and loads
each match into an IndexedFile. Patterns follow shell glob rules via
wcmatch: ``*`` stays within one directory, ``**`` spans any number of
directories, dotfiles need an explicit dot, and only files match.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

from wcmatch import glob

from llmdoc.scanner.models import IndexedFile
from llmdoc.utils.paths import normalize_path

logger = logging.getLogger(__name__)

GLOB_FLAGS = glob.GLOBSTAR | glob.FORCEUNIX

_RECURSIVE_SUFFIX = "/**"


def _clean(patterns: list[str]) -> list[str]:
    """Drop a leading ``./`` from each pattern."""
    return [p[2:] if p.startswith("./") else p for p in patterns]


def _matches(path: str, patterns: list[str]) -> bool:
    return bool(patterns) and glob.globmatch(path, patterns, flags=GLOB_FLAGS)


def _walk_files(root: Path, exclude: list[str]) -> list[str]:
    """List every non-excluded file below root in sorted order.

    A directory is not descended into when an exclude pattern of the
    form ``<dir-glob>/**`` covers it, so trees such as node_modules are
    skipped entirely.

    Args:
        root: Directory to walk.
        exclude: Cleaned exclude glob patterns.

    Returns:
        Root-relative, forward-slash file paths.
    """
    pruned = [
        p[: -len(_RECURSIVE_SUFFIX)] for p in exclude if p.endswith(_RECURSIVE_SUFFIX)
    ]

    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = normalize_path(os.path.relpath(dirpath, root))
        prefix = "" if rel_dir == "." else rel_dir + "/"

        dirnames[:] = [
            name for name in sorted(dirnames) if not _matches(prefix + name, pruned)
        ]

        for name in sorted(filenames):
            rel_path = prefix + name
            if not _matches(rel_path, exclude):
                found.append(rel_path)
    return found


def expand_patterns(
    root_dir: Union[str, Path],
    patterns: list[str],
    exclude: list[str],
) -> Iterator[str]:
    """Yield root-relative files matching each pattern in turn.

    Patterns are expanded one at a time, so a file matched by two
    patterns is yielded twice. Callers deduplicate. A pattern naming a
    directory yields nothing.

    Args:
        root_dir: Project root directory.
        patterns: Include glob patterns, relative to the root.
        exclude: Glob patterns of files to ignore.

    Yields:
        Normalized root-relative file paths.
    """
    root = Path(root_dir)
    if not root.is_dir():
        logger.warning("Root directory not found: %s", root)
        return

    candidates = _walk_files(root, _clean(exclude))
    for pattern in _clean(patterns):
        matches = [path for path in candidates if _matches(path, [pattern])]
        logger.debug("Pattern %s matched %d files", pattern, len(matches))
        yield from matches


def read_indexed_file(root_dir: Union[str, Path], rel_path: str) -> IndexedFile:
    """Load a single file into an IndexedFile.

    Args:
        root_dir: Project root directory.
        rel_path: Root-relative path of the file.

    Returns:
        The loaded file record.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    path = normalize_path(rel_path)
    content = (Path(root_dir) / path).read_text(encoding="utf-8")
    directory = os.path.dirname(path)
    return IndexedFile(path=path, content=content, directory=directory)


def scan_files(
    root_dir: Union[str, Path],
    include: list[str],
    exclude: list[str],
    log: Optional[logging.Logger] = None,
) -> list[IndexedFile]:
    """Scan a directory for files matching the include/exclude patterns.

    Unreadable files are logged and skipped. Overlapping patterns are
    deduplicated by path; the last read wins but the file keeps the
    position where it was first seen.

    Args:
        root_dir: Project root directory.
        include: Glob patterns of files to index.
        exclude: Glob patterns of files to ignore.
        log: Logger for progress messages. Defaults to the module logger.

    Returns:
        The indexed files. An empty list is a valid result.
    """
    log = log or logger
    log.debug("Scanning directory: %s", root_dir)
    log.debug("Include patterns: %s", ", ".join(include))
    log.debug("Exclude patterns: %s", ", ".join(exclude))

    files: dict[str, IndexedFile] = {}
    for rel_path in expand_patterns(root_dir, include, exclude):
        try:
            indexed = read_indexed_file(root_dir, rel_path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read file %s: %s", rel_path, e)
            continue
        files[indexed.path] = indexed
        log.debug("Indexed: %s", rel_path)

    log.info("Found %d files to process", len(files))
    return list(files.values())

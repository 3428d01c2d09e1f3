"""Context assembly for subfolder documentation.

Walks resolved imports outward from a set of seed files and loads
glob-matched additional files, producing the secondary "context"
files that accompany the main files of a documentation request.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from llmdoc.scanner.files import expand_patterns, read_indexed_file
from llmdoc.scanner.imports import extract_imports, resolve_import_path
from llmdoc.scanner.models import IndexedFile
from llmdoc.utils.paths import normalize_path

logger = logging.getLogger(__name__)


def resolve_imports_for_files(
    seed_files: list[IndexedFile],
    known_files: list[IndexedFile],
    root_dir: Union[str, Path],
    depth: int = 2,
    log: Optional[logging.Logger] = None,
) -> list[IndexedFile]:
    """Collect files imported by the seeds, breadth first, up to a depth.

    Each level extracts imports from the current frontier and resolves
    them on disk. A single visited set covers the whole walk, so seed
    files are never returned and every file appears at most once even
    when the import graph has diamonds or cycles.

    Args:
        seed_files: Main files whose imports are followed.
        known_files: Already-loaded files, reused instead of re-reading.
        root_dir: Project root directory.
        depth: Maximum number of import hops. Zero disables resolution.
        log: Logger for progress messages. Defaults to the module logger.

    Returns:
        Newly discovered files across all levels, in discovery order.
    """
    log = log or logger
    if depth <= 0:
        return []

    known = {normalize_path(f.path): f for f in known_files}
    visited = {normalize_path(f.path) for f in seed_files}
    discovered: list[IndexedFile] = []
    frontier = list(seed_files)

    for level in range(1, depth + 1):
        next_frontier = []
        for file in frontier:
            for import_path in extract_imports(file.content):
                resolved = resolve_import_path(import_path, file.path, root_dir)
                if resolved is None or resolved in visited:
                    continue
                visited.add(resolved)

                imported = known.get(resolved)
                if imported is None:
                    try:
                        imported = read_indexed_file(root_dir, resolved)
                    except (OSError, UnicodeDecodeError):
                        log.debug("Could not load imported file: %s", resolved)
                        continue
                    log.debug("Loaded imported file: %s", resolved)
                else:
                    log.debug("Resolved import: %s -> %s", file.path, resolved)

                next_frontier.append(imported)

        if not next_frontier:
            break
        log.debug("Import level %d added %d files", level, len(next_frontier))
        discovered.extend(next_frontier)
        frontier = next_frontier

    return discovered


def load_additional_files(
    root_dir: Union[str, Path],
    patterns: list[str],
    exclude: list[str],
    already_included: Iterable[str],
    log: Optional[logging.Logger] = None,
) -> list[IndexedFile]:
    """Load extra context files matched by glob patterns.

    Args:
        root_dir: Project root directory.
        patterns: Glob patterns of files to add.
        exclude: Glob patterns of files to ignore.
        already_included: Paths already present as main or context files.
        log: Logger for progress messages. Defaults to the module logger.

    Returns:
        The loaded files, skipping already-included paths and files
        that could not be read.
    """
    log = log or logger
    seen = {normalize_path(p) for p in already_included}
    additional = []

    for rel_path in expand_patterns(root_dir, patterns, exclude):
        if rel_path in seen:
            continue
        seen.add(rel_path)
        try:
            additional.append(read_indexed_file(root_dir, rel_path))
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read additional file %s: %s", rel_path, e)
            continue
        log.debug("Added additional file: %s", rel_path)

    return additional

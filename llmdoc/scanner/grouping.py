"""Partitioning of indexed files into configured subfolders."""

import logging
from pathlib import Path
from typing import Optional, Union

from llmdoc.scanner.files import scan_files
from llmdoc.scanner.models import IndexedFile, ScanResult
from llmdoc.utils.config import SubfolderConfig
from llmdoc.utils.paths import belongs_to_subfolder

logger = logging.getLogger(__name__)


def group_files_by_subfolder(
    files: list[IndexedFile],
    subfolders: list[SubfolderConfig],
    log: Optional[logging.Logger] = None,
) -> tuple[dict[str, list[IndexedFile]], list[IndexedFile]]:
    """Assign each file to its most specific matching subfolder.

    Subfolders are tried longest path first and a file is assigned to
    the first match only, so ``src/api/x.ts`` lands in ``src/api``
    rather than ``src`` when both are configured.

    Args:
        files: Indexed files to partition.
        subfolders: Configured subfolder targets.
        log: Logger for progress messages. Defaults to the module logger.

    Returns:
        A tuple of (grouped, ungrouped). ``grouped`` maps every
        configured subfolder path to its files, including empty lists
        for subfolders nothing matched.
    """
    log = log or logger
    grouped: dict[str, list[IndexedFile]] = {s.path: [] for s in subfolders}
    ordered = sorted(subfolders, key=lambda s: len(s.path), reverse=True)

    ungrouped = []
    for file in files:
        for subfolder in ordered:
            if belongs_to_subfolder(file.path, subfolder.path):
                grouped[subfolder.path].append(file)
                log.debug("Assigned %s to subfolder: %s", file.path, subfolder.path)
                break
        else:
            ungrouped.append(file)

    log.debug("Grouped files into %d subfolders", len(subfolders))
    log.debug("Ungrouped files: %d", len(ungrouped))
    return grouped, ungrouped


def scan_project(
    root_dir: Union[str, Path],
    include: list[str],
    exclude: list[str],
    subfolders: Optional[list[SubfolderConfig]] = None,
    log: Optional[logging.Logger] = None,
) -> ScanResult:
    """Scan a project and organize its files by subfolder.

    Args:
        root_dir: Project root directory.
        include: Glob patterns of files to index.
        exclude: Glob patterns of files to ignore.
        subfolders: Configured subfolder targets.
        log: Logger for progress messages. Defaults to the module logger.

    Returns:
        A ScanResult with the full file list and its partition.
    """
    files = scan_files(root_dir, include, exclude, log=log)
    grouped, ungrouped = group_files_by_subfolder(files, subfolders or [], log=log)
    return ScanResult(files=files, grouped=grouped, ungrouped=ungrouped)

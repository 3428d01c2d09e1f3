"""Path normalization and subfolder matching helpers."""

import os
from pathlib import Path
from typing import Optional, Union


def normalize_path(path: str) -> str:
    """Replace backslash separators with forward slashes."""
    return path.replace("\\", "/")


def belongs_to_subfolder(file_path: str, subfolder_path: str) -> bool:
    """Check whether a file path lies inside a subfolder.

    Args:
        file_path: Root-relative file path.
        subfolder_path: Root-relative subfolder path, with or without
            a trailing slash.

    Returns:
        True if the file is the subfolder itself or sits beneath it.
    """
    normalized_file = normalize_path(file_path)
    clean_subfolder = normalize_path(subfolder_path)
    if clean_subfolder.endswith("/"):
        clean_subfolder = clean_subfolder[:-1]

    return (
        normalized_file == clean_subfolder
        or normalized_file.startswith(clean_subfolder + "/")
    )


def to_relative(path: Union[str, Path], root: Union[str, Path]) -> Optional[str]:
    """Express a path relative to root, using forward slashes.

    Args:
        path: Absolute path, or a path relative to the working directory.
        root: Project root directory.

    Returns:
        The normalized relative path, or None if the path lies outside
        the root directory.
    """
    relative = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    if relative == ".." or relative.startswith(".." + os.sep):
        return None
    return normalize_path(relative)

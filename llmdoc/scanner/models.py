"""Data models shared by the scanner, resolver and generator.

An IndexedFile is one source file loaded into memory. A ScanResult
holds every indexed file plus its partition into per-subfolder
buckets and an ungrouped remainder.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IndexedFile:
    """A source file loaded from disk.

    Attributes:
        path: Root-relative path with forward slashes. Unique key.
        content: Raw text content of the file.
        directory: Root-relative parent directory, empty for the root.
    """

    path: str
    content: str
    directory: str = ""


@dataclass
class ScanResult:
    """Outcome of scanning and grouping a project.

    Attributes:
        files: Every indexed file, in scan order.
        grouped: Files per configured subfolder, keyed by subfolder path.
            Subfolders without matches map to an empty list.
        ungrouped: Files that matched no subfolder.
    """

    files: list[IndexedFile] = field(default_factory=list)
    grouped: dict[str, list[IndexedFile]] = field(default_factory=dict)
    ungrouped: list[IndexedFile] = field(default_factory=list)

    @property
    def file_paths(self) -> list[str]:
        """Paths of all indexed files."""
        return [f.path for f in self.files]

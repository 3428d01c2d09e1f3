"""Pattern-based import extraction and on-disk resolution.

Detects module references in JavaScript/TypeScript source text and
maps relative references to concrete files below the project root.
This is a textual heuristic, not a parser: imports inside comments or
string literals are picked up too.
"""

import os
import re
from pathlib import Path
from typing import Optional, Union

from llmdoc.utils.paths import to_relative

_IMPORT_CLAUSE = r"(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)"

# import x from "a", import { y } from "a", import * as z from "a", import "a"
_STATIC_IMPORT_RE = re.compile(
    r"import\s+(?:type\s+)?"
    rf"(?:{_IMPORT_CLAUSE}(?:\s*,\s*{_IMPORT_CLAUSE})*\s+from\s+)?"
    r"[\"']([^\"']+)[\"']"
)
_DYNAMIC_IMPORT_RE = re.compile(r"import\s*\(\s*[\"']([^\"']+)[\"']\s*\)")
_REQUIRE_RE = re.compile(r"require\s*\(\s*[\"']([^\"']+)[\"']\s*\)")
_EXPORT_FROM_RE = re.compile(
    r"export\s+(?:type\s+)?(?:\{[^}]*\}|\*(?:\s+as\s+\w+)?)\s+from\s+[\"']([^\"']+)[\"']"
)

_IMPORT_PATTERNS = (
    _STATIC_IMPORT_RE,
    _DYNAMIC_IMPORT_RE,
    _REQUIRE_RE,
    _EXPORT_FROM_RE,
)

# Probe order matters: a .ts file shadows a .js file with the same stem.
_SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", "")
_INDEX_FILES = ("index.ts", "index.tsx", "index.js", "index.jsx")

# Compiled-output suffix that TypeScript sources commonly reference.
_COMPILED_SUFFIX = ".js"


def extract_imports(content: str) -> list[str]:
    """Extract module reference literals from source text.

    Runs one pass per reference shape (static import, dynamic import,
    require, re-export) and concatenates the results. Duplicates are
    kept.

    Args:
        content: Source file text.

    Returns:
        The referenced module paths, in pass order.
    """
    imports = []
    for pattern in _IMPORT_PATTERNS:
        imports.extend(match.group(1) for match in pattern.finditer(content))
    return imports


def is_local_import(import_path: str) -> bool:
    """Whether a reference is relative or absolute rather than a package."""
    return import_path.startswith((".", "/"))


def resolve_import_path(
    import_path: str,
    from_file: str,
    root_dir: Union[str, Path],
) -> Optional[str]:
    """Resolve an import literal to a file below the project root.

    Package imports (anything not starting with ``.`` or ``/``) are not
    resolved. A trailing ``.js`` is stripped before probing, then
    ``.ts``, ``.tsx``, ``.js``, ``.jsx`` and the bare path are tried,
    followed by directory ``index.*`` files.

    Args:
        import_path: The literal from the import statement.
        from_file: Root-relative path of the importing file.
        root_dir: Project root directory.

    Returns:
        The root-relative path of the first existing candidate, or None
        if the import is external, dangling or points outside the root.
    """
    if not is_local_import(import_path):
        return None

    root = os.path.abspath(root_dir)
    from_dir = os.path.dirname(os.path.join(root, from_file))
    resolved = os.path.normpath(os.path.join(from_dir, import_path))

    if resolved.endswith(_COMPILED_SUFFIX):
        resolved = resolved[: -len(_COMPILED_SUFFIX)]

    candidates = [resolved + ext for ext in _SOURCE_EXTENSIONS]
    candidates.extend(os.path.join(resolved, index) for index in _INDEX_FILES)

    for candidate in candidates:
        if os.path.isfile(candidate):
            return to_relative(candidate, root)
    return None

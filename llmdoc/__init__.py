"""LLMDoc.

Scans a source tree, resolves import dependencies into per-folder
context bundles, and generates Markdown documentation with an LLM
provider (OpenAI, Anthropic or Google).
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

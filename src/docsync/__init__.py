"""docsync core library.

This package synchronizes component documentation from the core and
extensions source trees into a site's ``source/`` directory, rewriting each
README into a page with a restored title and a settings front-matter block.

Repo rules:
- Source trees are temporary; everything under ``tools/`` is removed per run.
- Generated pages under ``source/`` are overwritten, never merged.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

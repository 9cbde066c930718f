"""nova-extract core library.

Turns the catalogue, novel and chapter pages of novelasligeras.net into plain
records: catalogue entries, novel documents with their chapter lists, and
sanitized chapter markup.

The library never retries, caches or persists anything; a fetch failure or a
challenge page surfaces straight to the caller.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

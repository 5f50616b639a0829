"""Lightbox - directory-based image viewer."""
from __future__ import annotations
import os
import sys
from typing import List, Optional

from lightbox.directory import DirectoryIndex
from lightbox.logging import log


def resolve_start_path(args: List[str]) -> Optional[str]:
    """First existing argument as a file to open.

    A directory argument opens its first image; a directory without images
    (or an unreadable one) yields None.
    """
    for a in args:
        p = os.path.abspath(a)
        log(f"[ARGS] Checking argument: {a} -> {p}")
        if os.path.exists(p):
            return DirectoryIndex().resolve_open_path(p)
    return None


def main(argv: Optional[List[str]] = None) -> int:
    from lightbox.app import Application

    log("[MAIN] Starting application")
    args = sys.argv[1:] if argv is None else argv
    start_path = resolve_start_path(args)
    if not start_path:
        log("[ARGS] No image to open; waiting for a dropped file")

    app = Application()
    if not app.initialize(start_path):
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

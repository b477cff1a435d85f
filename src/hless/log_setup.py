from __future__ import annotations

import logging

_CONSOLE_FMT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(*, debug: bool = False) -> logging.Logger:
    root = logging.getLogger("hless")
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    # Console handler, stderr so nothing leaks into the paged output
    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug else logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FMT))
    root.addHandler(console)

    return root

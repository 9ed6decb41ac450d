from __future__ import annotations

import sys
from typing import TextIO


class Reporter:
    """Console output: progress on stdout, failures on stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out
        self._err = err

    def info(self, message: str) -> None:
        print(message, file=self._out or sys.stdout)

    def error(self, message: str) -> None:
        print(message, file=self._err or sys.stderr)

"""Workspace lookup: path normalisation, existence checks and file reads."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


def normalize_relative(path: str) -> str:
    """Return *path* as a forward-slash path without ``./`` or empty segments."""
    parts = [p for p in path.replace("\\", "/").split("/") if p not in {"", "."}]
    prefix = "/" if path.startswith(("/", "\\")) else ""
    return prefix + "/".join(parts)


class Workspace:
    """A checked-out repository rooted at ``root``.

    All paths accepted by this class are workspace-relative unless stated
    otherwise.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, relative_path: str) -> Path:
        """Absolute path of a workspace-relative path."""
        return self._root / PurePosixPath(normalize_relative(relative_path).lstrip("/"))

    def exists(self, relative_path: str) -> bool:
        """True if *relative_path* names an existing regular file."""
        return self.resolve(relative_path).is_file()

    def read_text(self, relative_path: str) -> str:
        """Read a workspace file as UTF-8 text, preserving its line terminators.

        Bytes that are not valid UTF-8 are decoded as U+FFFD.
        """
        path = self.resolve(relative_path)
        logger.debug("Reading %s", path)
        with path.open(encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()

    def relativize(self, path: str | Path) -> str:
        """Workspace-relative form of *path*; relative inputs are normalised."""
        candidate = Path(path)
        if candidate.is_absolute():
            try:
                return candidate.resolve().relative_to(self._root).as_posix()
            except ValueError:
                return candidate.as_posix()
        return normalize_relative(str(path))

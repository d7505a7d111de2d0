from __future__ import annotations

"""Filesystem helpers for locating repo-level resources (``config/`` etc.)."""

from pathlib import Path
from typing import Sequence


def _looks_like_repo_root(path: Path, markers: Sequence[str]) -> bool:
    """Return ``True`` if *path* contains any of the *marker* files/dirs."""
    return any((path / marker).exists() for marker in markers)


def project_root(markers: Sequence[str] | None = None) -> Path:
    """Return the absolute ``Path`` of the repo root.

    Walks *up* from this file until a directory holding one of *markers*
    (default: ``pyproject.toml`` or ``.git``) is found. Falls back to three
    parents above this file, i.e. the directory that contains ``src/``.
    """
    if markers is None:
        markers = ("pyproject.toml", ".git")

    cur = Path(__file__).resolve()
    for parent in cur.parents:
        if _looks_like_repo_root(parent, markers):
            return parent
    return cur.parents[3]


def config_path(*parts: str) -> Path:
    """Return ``<project root>/config/<parts...>``; the file may not exist."""
    return project_root().joinpath("config", *parts)


__all__ = [
    "project_root",
    "config_path",
]

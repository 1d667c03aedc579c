from __future__ import annotations

from typing import overload


@overload
def normalize_path(path: str) -> str: ...


@overload
def normalize_path(path: None) -> None: ...


def normalize_path(path: str | None) -> str | None:
    """Use forward slashes so keys differing only by separator style are equal."""
    if not path:
        return path
    return path.replace("\\", "/")

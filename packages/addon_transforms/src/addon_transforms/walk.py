from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path


def iter_files(root: Path) -> Iterator[str]:
    """
    Yield every file below ``root`` as a POSIX path relative to ``root``.

    Directories are descended into but never yielded. Children are visited in
    sorted order so repeated runs see the same sequence. A missing or
    unreadable root raises ``OSError`` on first iteration.
    """

    for name in sorted(os.listdir(root)):
        path = Path(root) / name
        if path.is_dir():
            for child in iter_files(path):
                yield f"{name}/{child}"
        else:
            yield name


def walk(root: Path) -> list[str]:
    return list(iter_files(root))

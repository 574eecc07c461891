from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Set, Tuple

from tools.sound_extract.errors import MissingInputDirectory

DEFAULT_SUFFIXES: Tuple[str, ...] = (".ts", ".tsx")


def ensure_source_dir(root: Path) -> Path:
    if not root.is_dir():
        raise MissingInputDirectory(root)
    return root


def _walk(directory: Path, suffixes: Tuple[str, ...], seen: Set[Path]) -> Iterator[Path]:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            real = entry.resolve()
            # symlinked directories are followed once; cycles are cut here
            if real in seen:
                continue
            seen.add(real)
            yield from _walk(entry, suffixes, seen)
        elif entry.name.endswith(suffixes) and (entry.is_file() or entry.is_symlink()):
            # dangling links are yielded so the read failure gets recorded
            yield entry


def iter_source_files(root: Path, suffixes: Iterable[str] = DEFAULT_SUFFIXES) -> Iterator[Path]:
    """Yield candidate source files under ``root`` depth first, in name order.

    The root is checked eagerly so a missing directory fails at call time
    rather than on first iteration.
    """

    ensure_source_dir(root)
    return _walk(root, tuple(suffixes), {root.resolve()})

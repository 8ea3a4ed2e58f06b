"""Locating descriptor files written by the inspection aspect."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from ..logging import get_logger

_LOGGER = get_logger("descriptors.discovery")


def find_descriptor_files(output_dir: Path, marker: str) -> List[Path]:
    """Return files below ``output_dir`` whose name contains ``marker``.

    Results are sorted so repeated runs merge descriptors in the same order.
    Symlinked directories are followed, since bazel-bin is itself a symlink.
    """
    if not output_dir.is_dir():
        _LOGGER.debug("Descriptor directory %s does not exist", output_dir)
        return []
    found: List[Path] = []
    for current, _dirs, files in os.walk(output_dir, followlinks=True):
        for name in files:
            if marker in name:
                found.append(Path(current) / name)
    return sorted(found)


def remove_descriptor_files(paths: Iterable[Path | str]) -> int:
    """Delete consumed descriptors, ignoring files that are already gone."""
    removed = 0
    for path in paths:
        try:
            Path(path).unlink()
        except FileNotFoundError:
            continue
        removed += 1
    return removed

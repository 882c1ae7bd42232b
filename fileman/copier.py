"""Exclusive-create file copy that preserves permission bits."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_file(source: Path, destination: Path) -> bool:
    """Copy ``source`` to a new ``destination``.

    Returns ``False`` without touching ``destination`` when it already
    exists. A failed transfer removes the partially written destination and
    returns ``False``; ``True`` means the file was created and fully copied.
    """
    source = Path(source)
    destination = Path(destination)
    created = False
    try:
        with open(source, "rb") as src_handle:
            try:
                dst_handle = open(destination, "xb")
            except FileExistsError:
                return False
            created = True
            with dst_handle:
                shutil.copyfileobj(src_handle, dst_handle)
        shutil.copymode(source, destination)
    except OSError as exc:
        logger.info("copy %s -> %s failed: %s", source, destination, exc)
        if created:
            _discard_partial(destination)
        return False
    return True


def _discard_partial(destination: Path) -> None:
    try:
        destination.unlink()
    except OSError:
        logger.warning("could not remove partial copy %s", destination)


__all__ = ["copy_file"]

"""
Repository archive extraction.

GitLab wraps archive contents in one synthetic top-level directory
(e.g. ``demo-main-1a2b3c/``). Extraction strips that root so files land
directly in the repository working tree.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath

from reposqueeze.core.exceptions import ArchiveError

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


def open_archive(data: bytes) -> zipfile.ZipFile:
    """
    Open an in-memory zip archive.

    Raises:
        ArchiveError: If the data is not a valid zip archive
    """
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"downloaded archive is not a valid zip file: {e}") from e


def count_files(archive: zipfile.ZipFile) -> int:
    """Count non-directory entries in the archive."""
    return sum(1 for info in archive.infolist() if not info.is_dir())


def archive_root(archive: zipfile.ZipFile) -> str | None:
    """
    Root prefix of the archive, taken from the first entry's leading segment.

    Returns:
        The prefix including its trailing slash, or None for an empty archive
    """
    entries = archive.infolist()
    if not entries:
        return None
    return entries[0].filename.split("/", 1)[0] + "/"


def strip_root(name: str, root: str) -> str | None:
    """
    Strip the root prefix from an entry name.

    Returns:
        The relative path, or None when the entry is outside the root or
        is the root itself

    Example:
        >>> strip_root("root123/a/b.txt", "root123/")
        'a/b.txt'
        >>> strip_root("root123/", "root123/") is None
        True
    """
    if not name.startswith(root):
        return None
    relative = name[len(root) :].rstrip("/")
    return relative or None


def _entry_mode(info: zipfile.ZipInfo, default: int) -> int:
    mode = stat.S_IMODE(info.external_attr >> 16)
    return mode or default


def _destination(repo_path: Path, relative: str) -> Path:
    pure = PurePosixPath(relative)
    if pure.is_absolute() or ".." in pure.parts:
        raise ArchiveError(f"archive entry escapes the repository: {relative}")
    return repo_path.joinpath(*pure.parts)


def extract_archive(archive: zipfile.ZipFile, repo_path: Path) -> int:
    """
    Extract an archive into the repository, stripping its root directory.

    Directories are created with their recorded permission bits; files are
    created or truncated with their recorded permission bits and their
    bytes copied verbatim.

    Args:
        archive: Open zip archive
        repo_path: Repository working tree to extract into

    Returns:
        Number of files written

    Raises:
        ArchiveError: If an entry would be written outside the repository
        OSError: If a directory or file cannot be written
    """
    root = archive_root(archive)
    if root is None:
        return 0

    written = 0
    for info in archive.infolist():
        relative = strip_root(info.filename, root)
        if relative is None:
            continue

        destination = _destination(repo_path, relative)

        if info.is_dir():
            mode = _entry_mode(info, DEFAULT_DIR_MODE)
            destination.mkdir(parents=True, exist_ok=True)
            os.chmod(destination, mode)
            continue

        destination.parent.mkdir(parents=True, exist_ok=True)
        mode = _entry_mode(info, DEFAULT_FILE_MODE)
        fd = os.open(destination, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as target, archive.open(info) as source:
            shutil.copyfileobj(source, target)
        # O_CREAT only applies the mode to new files
        os.chmod(destination, mode)
        written += 1

    logger.debug("Extracted %d files from archive root %s", written, root)
    return written

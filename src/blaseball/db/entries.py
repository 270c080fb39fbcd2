"""Directory listing used to fingerprint snapshot dumps."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, order=True)
class Entry:
    """Identity metadata for one file in the data directory."""

    file_name: str
    size: int  # bytes
    modified_ns: int  # st_mtime_ns


def read_dir(path: Path) -> list[Entry]:
    """List the regular files directly inside `path`, sorted by name.

    Subdirectories are skipped; nothing is read recursively.

    Raises:
        OSError: If the directory is missing or unreadable
    """
    entries = []
    with os.scandir(path) as it:
        for dir_entry in it:
            if not dir_entry.is_file():
                continue
            stat = dir_entry.stat()
            entries.append(
                Entry(
                    file_name=dir_entry.name,
                    size=stat.st_size,
                    modified_ns=stat.st_mtime_ns,
                )
            )
    return sorted(entries)

"""Rotated-file naming and gzip archiving."""

import contextlib
import gzip
import os
import shutil

ARCHIVE_SUFFIX = ".gz"


def parse_rotation_index(name: str, base_name: str) -> int | None:
    """Extract the rotation index from ``<base>.<n>`` or ``<base>.<n>.gz``.

    Returns None for names that don't belong to *base_name* or whose
    trailing component isn't a number.
    """
    prefix = base_name + "."
    if not name.startswith(prefix):
        return None
    suffix = name[len(prefix):]
    if suffix.endswith(ARCHIVE_SUFFIX):
        suffix = suffix[:-len(ARCHIVE_SUFFIX)]
    number = suffix.rsplit(".", 1)[-1]
    if not (number.isascii() and number.isdigit()):
        return None
    return int(number)


def get_rotated_files(filename: str) -> list[str]:
    """List names in *filename*'s directory that look like its rotations.

    Raises OSError if the directory can't be listed.
    """
    log_dir = os.path.dirname(filename) or "."
    base_name = os.path.basename(filename)
    prefix = base_name + "."
    return sorted(name for name in os.listdir(log_dir) if name.startswith(prefix))


def next_rotation_index(filename: str) -> int:
    """Return one past the highest rotation index currently on disk."""
    base_name = os.path.basename(filename)
    max_num = 0
    for name in get_rotated_files(filename):
        num = parse_rotation_index(name, base_name)
        if num is not None and num > max_num:
            max_num = num
    return max_num + 1


def compress_file(filepath: str) -> str:
    """Gzip *filepath* into ``filepath + '.gz'``. Returns the .gz path.

    The archive is created exclusively: an existing archive raises
    FileExistsError and is left untouched. A partially written archive
    is removed before the error propagates. The source file is not
    deleted here.
    """
    gz_path = filepath + ARCHIVE_SUFFIX
    with open(filepath, "rb") as f_in:
        arc = open(gz_path, "xb")
        try:
            with arc, gzip.GzipFile(fileobj=arc, mode="wb") as f_out:
                shutil.copyfileobj(f_in, f_out)
        except BaseException:
            with contextlib.suppress(OSError):
                os.remove(gz_path)
            raise
    return gz_path

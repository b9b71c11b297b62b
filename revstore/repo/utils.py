from __future__ import annotations

import os
import stat
from shutil import rmtree as shutil_rmtree
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def _make_writable_and_retry(func, path, exc_info):
    # anything but a permission problem is not ours to fix
    if os.access(path, os.W_OK):
        raise exc_info[1]
    os.chmod(path, stat.S_IWUSR)
    func(path)


def rmtree(path: Path) -> None:
    """Remove a directory tree, including read-only files

    Git writes its object files without write permission. On some
    platforms, they cannot be deleted without adding it first.
    """
    # `onerror` is deprecated with PY3.12, in favor of `onexc`
    shutil_rmtree(path, onerror=_make_writable_and_retry)

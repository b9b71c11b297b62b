from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

from datasalad.itertools import (
    decode_bytes,
    itemize,
)

from revstore.runners import call_git_bytes


def iter_gitcmd_zlines(
    path: Path,
    cmd: str,
    *args: str,
    timeout: float | None = None,
) -> Iterator[str]:
    """Yield the zero-byte separated output items of ``git <cmd> -z <args>``

    Git runs in ``path``, and must exit within ``timeout`` seconds. Its
    output is read completely before the first item is yielded, and each
    item is decoded to ``str``.
    """
    out = call_git_bytes([cmd, '-z', *args], cwd=path, timeout=timeout)
    yield from itemize(
        decode_bytes([out], backslash_replace=True),
        sep='\0',
        keep_ends=False,
    )


def git_ls_tree(path: Path, *args: str, timeout: float | None = None) -> Iterator[str]:
    """Run ``git ls-tree`` at a given ``path`` and with ``args``"""
    return iter_gitcmd_zlines(path, 'ls-tree', *args, timeout=timeout)


def git_log(path: Path, *args: str, timeout: float | None = None) -> Iterator[str]:
    """Run ``git log`` at a given ``path`` and with ``args``"""
    return iter_gitcmd_zlines(path, 'log', *args, timeout=timeout)

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

from revstore.iter_collections.utils import git_ls_tree
from revstore.repo import (
    GitTreeItem,
    Treeish,
)


def iter_gittree(
    tree: Treeish,
    *,
    recursion: str = 'repository',
    paths: tuple[PurePosixPath, ...] = (),
    timeout: float | None = None,
) -> Generator[GitTreeItem]:
    """Uses ``git ls-tree`` to report on a tree in a Git repository

    Parameters
    ----------
    tree: Treeish
      The tree to report on.
    recursion: {'repository', 'none'}, optional
      Behavior for recursion into subtrees. By default (``repository``),
      all items in the tree are reported, including the subtrees themselves,
      but not the content of submodules. If ``none``, only direct children
      are reported on.
    paths: tuple, optional
      If given, only report on items matching these paths. Without
      recursion, the items with exactly these paths are reported (if they
      exist), regardless of their depth in the tree.
    timeout: float, optional
      Time limit (in seconds) for the ``git ls-tree`` call.

    Yields
    ------
    :class:`GitTreeItem`
      The ``relpath`` attribute of an item is the path relative to the tree
      root, as reported by Git (in POSIX conventions).
    """
    # object size is reported for blobs only, and is not free to compute
    # for Git. But we need it for all file reports anyway
    lstree_args = ['--long', '--full-tree']
    if recursion == 'repository':
        # -t reports the trees too, when recursing
        lstree_args.extend(('-r', '-t'))

    for line in git_ls_tree(
        tree.repo.path,
        *lstree_args,
        tree.treeish,
        '--',
        *(str(p) for p in paths),
        timeout=timeout,
    ):
        yield _get_tree_item(tree, line)


def _get_tree_item(tree: Treeish, spec: str) -> GitTreeItem:
    # we do not go for a custom format that would allow for a single split
    # by tab, because if we do, Git starts quoting paths with special
    # characters (like tab) again
    props, path = spec.split('\t', maxsplit=1)
    # the type name (blob/tree etc.) is skipped, the mode lookup provides
    # more detail. The size is padded with spaces, and is `-` for non-blobs
    mode, _, sha, size = props.split()
    return GitTreeItem(
        tree=tree,
        relpath=PurePosixPath(path),
        gitsha=sha,
        mode=mode,
        size=None if size == '-' else int(size),
    )

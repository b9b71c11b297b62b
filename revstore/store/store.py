from __future__ import annotations

import logging
import os
from pathlib import (
    Path,
    PurePosixPath,
)
from tempfile import mkdtemp
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from revstore.config import StoreSettings

from revstore.constraints import (
    ConstraintError,
    EnsureRepositoryId,
)
from revstore.consts import (
    GITIGNORE_RELPATH,
    INITIAL_COMMIT_MESSAGE,
    REPOSITORY_SUFFIX,
)
from revstore.exceptions import (
    NotFound,
    RepositoryAlreadyExists,
    failure_context,
)
from revstore.repo import (
    OriginRepo,
    WorkingCopy,
    rmtree,
)
from revstore.store.pool import ExclusiveAccessPool
from revstore.store.repository import DocumentRepository
from revstore.store.save import write_files
from revstore.store.types import (
    FileChange,
    Signature,
)

lgr = logging.getLogger('revstore.store')

_ensure_repo_id = EnsureRepositoryId(REPOSITORY_SUFFIX)


class DocumentStore:
    """Collection of document repositories under a common root

    A repository is identified by a relative, slash-separated path (e.g.
    ``team/handbook``). Its origin is a bare repository at this path plus
    a ``.git`` suffix under ``settings.origin_root``
    (``team/handbook.git``), and its working copy is at the same location
    under ``settings.workcopy_root``. No component of an identifier may
    end in ``.git``, so repositories never nest. ``team`` and
    ``team/handbook`` are independent repositories.

    If no ``pool`` is given, the store creates its own. All stores and
    repository handles that share a set of repositories must share a pool.
    """

    def __init__(
        self,
        settings: StoreSettings,
        pool: ExclusiveAccessPool | None = None,
    ):
        self.settings = settings
        self.pool = ExclusiveAccessPool() if pool is None else pool

    def __str__(self):
        return f'{self.__class__.__name__}({self.settings.origin_root})'

    def _get_id(self, repo: str | PurePosixPath) -> PurePosixPath:
        return _ensure_repo_id(repo)

    def _get_origin_path(self, repo_id: PurePosixPath) -> Path:
        return _get_location(self.settings.origin_root, repo_id)

    def _get_workcopy_path(self, repo_id: PurePosixPath) -> Path:
        return _get_location(self.settings.workcopy_root, repo_id)

    def _get_origin(self, repo_id: PurePosixPath) -> OriginRepo | None:
        path = self._get_origin_path(repo_id)
        if not path.is_dir():
            return None
        try:
            return OriginRepo(path)
        except ValueError:
            lgr.debug('Not a repository origin: %s', path)
            return None

    def exists(self, repo: str | PurePosixPath) -> bool:
        """Whether there is a repository ``repo``

        This is ``True`` exactly when :meth:`get_repository` returns a
        handle for ``repo``.
        """
        return self._get_origin(self._get_id(repo)) is not None

    def get_repository(self, repo: str | PurePosixPath) -> DocumentRepository:
        """Return a handle for repository ``repo``

        Raises ``NotFound`` if there is no such repository.
        """
        repo_id = self._get_id(repo)
        origin = self._get_origin(repo_id)
        if origin is None:
            raise NotFound('repository', repo_id)
        return DocumentRepository(
            str(repo_id),
            origin,
            self._get_workcopy_path(repo_id),
            self.settings,
            self.pool,
        )

    def list_repositories(self) -> list[str]:
        """Identifiers of all repositories, sorted"""
        root = self.settings.origin_root
        repos = []
        for dirpath, dirnames, _ in os.walk(root):
            origins = [d for d in dirnames if d.endswith(REPOSITORY_SUFFIX)]
            for name in origins:
                # never descend into an origin
                dirnames.remove(name)
                repo_id = Path(dirpath, name[: -len(REPOSITORY_SUFFIX)])
                repo_id = repo_id.relative_to(root).as_posix()
                try:
                    if name != REPOSITORY_SUFFIX and self.exists(repo_id):
                        repos.append(repo_id)
                except ConstraintError:
                    lgr.debug('Ignoring %s in %s', name, dirpath)
        return sorted(repos)

    def init_repository(
        self,
        repo: str | PurePosixPath,
        committer: Signature | None = None,
        files: Iterable[FileChange] = (),
    ) -> DocumentRepository:
        """Create a new repository with an initial revision

        The initial revision is made on the primary branch. It contains
        ``files``, and an empty ``.gitignore`` file, unless ``files`` has
        one already. Its message is ``Initial commit``.

        Raises ``RepositoryAlreadyExists`` if there is a repository
        ``repo`` already. No partial origin is left behind on failure.
        """
        repo_id = self._get_id(repo)
        path = self._get_origin_path(repo_id)
        files = tuple(files)
        if committer is None:
            committer = Signature.from_settings(self.settings)
        with self.pool.hold(str(path)):
            if path.exists():
                raise RepositoryAlreadyExists(str(repo_id))
            with failure_context('init repository', repository=repo_id):
                path.mkdir(parents=True)
                try:
                    origin = OriginRepo.init_at(
                        path,
                        self.settings.primary_branch,
                        timeout=self.settings.command_timeout,
                    )
                    self._make_initial_commit(origin, committer, files)
                except Exception:
                    try:
                        rmtree(path)
                    except OSError as e:
                        lgr.warning('Cannot remove failed origin at %s: %s', path, e)
                    raise
        lgr.info('Initialized repository %s at %s', repo_id, path)
        return self.get_repository(repo_id)

    def _make_initial_commit(
        self,
        origin: OriginRepo,
        committer: Signature,
        files: tuple[FileChange, ...],
    ) -> None:
        settings = self.settings
        if all(f.path != PurePosixPath(GITIGNORE_RELPATH) for f in files):
            files = (*files, FileChange(PurePosixPath(GITIGNORE_RELPATH), b''))
        tmpdir = Path(mkdtemp(prefix='revstore-init-'))
        try:
            wc = WorkingCopy.clone_from(
                origin,
                tmpdir / 'wc',
                timeout=settings.clone_timeout,
            )
            # cloning an empty origin gives no checked out branch
            wc.set_head_branch(
                settings.primary_branch,
                timeout=settings.command_timeout,
            )
            write_files(wc, files)
            wc.stage_all(timeout=settings.command_timeout)
            wc.commit(
                INITIAL_COMMIT_MESSAGE,
                name=committer.name,
                email=committer.email,
                date=committer.when,
                timeout=settings.command_timeout,
            )
            wc.push(
                f'HEAD:refs/heads/{settings.primary_branch}',
                timeout=settings.pull_timeout,
            )
        finally:
            try:
                rmtree(tmpdir)
            except OSError as e:
                lgr.warning('Cannot remove temporary clone at %s: %s', tmpdir, e)

    def delete_repository(self, repo: str | PurePosixPath) -> None:
        """Remove the origin and the working copy of repository ``repo``

        Raises ``NotFound`` if there is no such repository.
        """
        repo_id = self._get_id(repo)
        path = self._get_origin_path(repo_id)
        with self.pool.hold(str(path)):
            if self._get_origin(repo_id) is None:
                raise NotFound('repository', repo_id)
            with failure_context('delete repository', repository=repo_id):
                wcpath = self._get_workcopy_path(repo_id)
                if wcpath.exists():
                    rmtree(wcpath)
                rmtree(path)
        lgr.info('Deleted repository %s', repo_id)


def _get_location(root: Path, repo_id: PurePosixPath) -> Path:
    parent = root.joinpath(*repo_id.parent.parts)
    return (parent / f'{repo_id.name}{REPOSITORY_SUFFIX}').absolute()

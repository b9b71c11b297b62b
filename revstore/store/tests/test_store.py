from dataclasses import replace

import pytest

from revstore.constraints import ConstraintError
from revstore.exceptions import (
    ExternalProcessFailure,
    NotFound,
    RepositoryAlreadyExists,
)
from revstore.tests.utils import (
    signature_at,
    tester_name,
)

from .. import (
    DocumentStore,
    FileChange,
)


def test_init_roundtrip(docrepo):
    revs = docrepo.commits('', lambda m: True)
    assert len(revs) == 1
    rev = revs[0]
    assert rev.message == 'Initial commit'
    assert docrepo.get_file_data_at(rev.id, 'readme.txt') == b'hello'
    # an empty .gitignore is always added
    assert docrepo.get_file_data_at(rev.id, '.gitignore') == b''
    assert docrepo.get_branches() == ['master']
    assert str(docrepo) == 'DocumentRepository(docs)'
    # initialization does not need a working copy
    assert not docrepo.workcopy_path.exists()


def test_init_existing(docstore, docrepo):
    tip = docrepo.get_revision().id
    with pytest.raises(RepositoryAlreadyExists, match='docs'):
        docstore.init_repository('docs', committer=signature_at(5))
    assert docrepo.get_revision().id == tip


def test_init_nested_and_list(docstore):
    assert docstore.list_repositories() == []
    docstore.init_repository('team/handbook', committer=signature_at(0))
    notes = docstore.init_repository(
        'notes',
        files=[FileChange('.gitignore', b'*.tmp\n')],
    )
    assert docstore.list_repositories() == ['notes', 'team/handbook']
    assert notes.get_file_data_at('', '.gitignore') == b'*.tmp\n'
    # the configured identity is used, if there is no other
    assert notes.get_revision().author_name == tester_name
    handbook = docstore.get_repository('team/handbook')
    assert handbook.name == 'team/handbook'
    assert handbook.origin.path == (
        docstore.settings.origin_root / 'team' / 'handbook.git'
    )
    assert [f.name for f in handbook.list_files_at()] == ['.gitignore']


def test_init_failure_leaves_no_origin(store_settings):
    store = DocumentStore(replace(store_settings, primary_branch='bad..branch'))
    with pytest.raises(ExternalProcessFailure) as e:
        store.init_repository('docs', committer=signature_at(0))
    assert 'init repository [repository: docs]' in e.value.msg
    assert not store.exists('docs')
    assert store.list_repositories() == []


def test_exists_and_delete(docstore, docrepo):
    assert docstore.exists('docs')
    assert not docstore.exists('other')
    # make sure there is a working copy too
    docrepo.save(signature_at(1), 'v1', 'master', 'master', [])
    assert docrepo.workcopy_path.exists()

    docstore.delete_repository('docs')
    assert not docstore.exists('docs')
    assert not docrepo.workcopy_path.exists()
    assert not docstore.pool.locked(str(docrepo.origin.path))
    with pytest.raises(NotFound, match='repository not found'):
        docstore.delete_repository('docs')
    with pytest.raises(NotFound, match='repository not found'):
        docstore.get_repository('docs')

    # the name can be reused
    again = docstore.init_repository('docs', committer=signature_at(10))
    assert len(again.commits()) == 1


def test_invalid_repository_id(docstore):
    for repo in ('../escape', '/abs', '', 'docs/.git', 'docs.git', 'a.git/b'):
        with pytest.raises(ConstraintError):
            docstore.exists(repo)
        with pytest.raises(ConstraintError):
            docstore.init_repository(repo)


def test_nested_repositories_are_independent(docstore):
    team = docstore.init_repository('team', committer=signature_at(0))
    docs = docstore.init_repository('team/docs', committer=signature_at(1))
    team.save(signature_at(2), 'team', 'master', 'master', [])
    docs.save(signature_at(3), 'docs', 'master', 'master', [])
    assert docstore.list_repositories() == ['team', 'team/docs']
    # neither storage location is inside the other
    assert not docs.origin.path.is_relative_to(team.origin.path)
    assert not docs.workcopy_path.is_relative_to(team.workcopy_path)

    docstore.delete_repository('team')
    assert not docstore.exists('team')
    assert docstore.exists('team/docs')
    assert docstore.list_repositories() == ['team/docs']
    docs = docstore.get_repository('team/docs')
    assert [r.message for r in docs.commits()] == ['docs', 'Initial commit']
    assert docs.workcopy_path.exists()

    # and the other way around
    docstore.init_repository('team', committer=signature_at(4))
    docstore.delete_repository('team/docs')
    assert docstore.list_repositories() == ['team']
    assert len(docstore.get_repository('team').commits()) == 1


def test_exists_agrees_with_get_repository(docstore):
    docstore.init_repository('a/b', committer=signature_at(0))
    # an intermediate directory is no repository
    assert not docstore.exists('a')
    with pytest.raises(NotFound, match='repository not found'):
        docstore.get_repository('a')
    with pytest.raises(NotFound, match='repository not found'):
        docstore.delete_repository('a')
    assert docstore.exists('a/b')
    # and its name is free to use
    docstore.init_repository('a', committer=signature_at(1))
    assert docstore.list_repositories() == ['a', 'a/b']


def test_list_ignores_foreign_directories(docstore, docrepo):
    root = docstore.settings.origin_root
    (root / 'junk.git').mkdir()
    (root / 'plain' / 'deeper').mkdir(parents=True)
    (root / '.git').mkdir()
    assert docstore.list_repositories() == ['docs']
    assert not docstore.exists('junk')
    with pytest.raises(RepositoryAlreadyExists, match='junk'):
        docstore.init_repository('junk')

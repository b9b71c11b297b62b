from functools import partial

import pytest

from revstore.exceptions import (
    BranchAlreadyExists,
    ExternalProcessFailure,
    NotFound,
)
from revstore.tests.utils import (
    signature_at,
    tester_name,
)

from .. import (
    FileChange,
    run_concurrently,
)


def test_save_parent_chain(docrepo):
    first = docrepo.save(
        signature_at(1), 'v1', 'master', 'master', [FileChange('a.txt', b'v1')]
    )
    second = docrepo.save(
        signature_at(2), 'v2', 'master', 'master', [FileChange('a.txt', b'v2')]
    )
    assert docrepo.get_revision(second).parent_ids == (first,)
    assert docrepo.get_file_data_at(second, 'a.txt') == b'v2'
    assert docrepo.get_file_data_at(first, 'a.txt') == b'v1'
    assert docrepo.get_revision().id == second
    # untouched files are kept
    assert docrepo.get_file_data_at(second, 'readme.txt') == b'hello'


def test_save_without_changes(docrepo):
    base = docrepo.get_revision().id
    rev = docrepo.save(signature_at(1), 'nothing', 'master', 'master', [])
    assert rev != base
    assert docrepo.get_revision(rev).parent_ids == (base,)


def test_save_default_identity(docrepo):
    rev = docrepo.save(
        None, 'anonymous', 'master', 'master', [FileChange('a.txt', b'a')]
    )
    assert docrepo.get_revision(rev).author_name == tester_name


def test_save_new_branch(docrepo):
    base = docrepo.get_revision().id
    rev = docrepo.save(
        signature_at(1),
        'draft',
        'master',
        'draft',
        [FileChange('sub/dir/b.txt', b'b')],
    )
    assert docrepo.get_branches() == ['draft', 'master']
    assert docrepo.get_revision(rev).parent_ids == (base,)
    assert docrepo.get_revision('draft').id == rev
    # the source branch is unchanged
    assert docrepo.get_revision('master').id == base
    assert docrepo.get_file_data_at('draft', 'sub/dir/b.txt') == b'b'


def test_save_existing_new_branch(docrepo):
    docrepo.create_branch('master', 'draft')
    tip = docrepo.get_revision('draft').id
    with pytest.raises(BranchAlreadyExists, match='draft'):
        docrepo.save(
            signature_at(1), 'x', 'master', 'draft', [FileChange('a.txt', b'a')]
        )
    assert docrepo.get_revision('draft').id == tip


def test_save_unknown_branch(docrepo):
    with pytest.raises(NotFound, match='branch not found'):
        docrepo.save(signature_at(1), 'x', 'nope', 'nope', [])
    assert docrepo.get_branches() == ['master']


def test_save_concurrently(docrepo):
    n = 6
    results = run_concurrently(
        [
            (
                f'save{i}',
                partial(
                    docrepo.save,
                    signature_at(i + 1),
                    f'save {i}',
                    'master',
                    'master',
                    [FileChange(f'file{i}.txt', str(i).encode())],
                ),
            )
            for i in range(n)
        ],
        max_workers=n,
    )
    assert all(r.success for r in results), [r.error for r in results]
    saved = {r.value for r in results}
    assert len(saved) == n
    # all saves form a single line of descent on top of the initial commit
    chain = []
    rev = docrepo.get_revision('master')
    while rev.parent_ids:
        assert len(rev.parent_ids) == 1
        chain.append(rev.id)
        rev = docrepo.get_revision(rev.parent_ids[0])
    assert rev.message == 'Initial commit'
    assert set(chain) == saved
    # no save lost the changes of another
    for i in range(n):
        assert docrepo.get_file_data_at('master', f'file{i}.txt') == str(i).encode()


def test_save_recovers_from_stale_index_lock(docrepo):
    docrepo.save(signature_at(1), 'v1', 'master', 'master', [])
    lock = docrepo.workcopy_path / '.git' / 'index.lock'
    lock.touch()
    # the leftover lock breaks this save, but is removed on exit
    with pytest.raises(ExternalProcessFailure) as e:
        docrepo.save(
            signature_at(2), 'v2', 'master', 'master', [FileChange('a.txt', b'v2')]
        )
    assert 'save [repository: docs]' in e.value.msg
    assert not lock.exists()
    # and the next attempt succeeds
    rev = docrepo.save(
        signature_at(3), 'v3', 'master', 'master', [FileChange('a.txt', b'v3')]
    )
    assert docrepo.get_file_data_at(rev, 'a.txt') == b'v3'


def test_checkout_and_save(docrepo):
    base = docrepo.get_revision().id
    docrepo.save(
        signature_at(1), 'v1', 'master', 'master', [FileChange('a.txt', b'v1')]
    )
    rev = docrepo.checkout_and_save(
        signature_at(2), 'fix', base, 'fix', [FileChange('a.txt', b'fix')]
    )
    assert docrepo.get_revision(rev).parent_ids == (base,)
    assert docrepo.get_file_data_at('fix', 'a.txt') == b'fix'
    assert docrepo.get_file_data_at('master', 'a.txt') == b'v1'

    with pytest.raises(BranchAlreadyExists):
        docrepo.checkout_and_save(signature_at(3), 'again', base, 'fix', [])
    with pytest.raises(NotFound):
        docrepo.checkout_and_save(signature_at(3), 'x', 'f' * 40, 'other', [])
    assert docrepo.get_branches() == ['fix', 'master']


def test_checkout_and_save_primary_tip(docrepo):
    tip = docrepo.save(
        signature_at(1), 'v1', 'master', 'master', [FileChange('a.txt', b'v1')]
    )
    rev = docrepo.checkout_and_save(
        signature_at(2), 'next', '', 'next', [FileChange('b.txt', b'b')]
    )
    assert docrepo.get_revision(rev).parent_ids == (tip,)


def test_clean_push(docrepo):
    rev = docrepo.clean_push(
        signature_at(1), 'fresh', 'master', [FileChange('only.txt', b'only')]
    )
    assert [f.name for f in docrepo.list_files_at(rev)] == ['only.txt']
    # history is kept
    assert len(docrepo.get_revision(rev).parent_ids) == 1

import pytest

from revstore.exceptions import NotFound
from revstore.tests.utils import signature_at

from .. import FileChange


@pytest.fixture
def branched(docrepo):
    """Repository with branches ``master`` and ``feature`` that share history

    Returns the repository and the revisions ids in order of creation.
    """
    base = docrepo.get_revision().id
    m1 = docrepo.save(
        signature_at(1), 'm1', 'master', 'master', [FileChange('m.txt', b'1')]
    )
    f1 = docrepo.save(
        signature_at(2), 'f1', 'master', 'feature', [FileChange('f.txt', b'1')]
    )
    m2 = docrepo.save(
        signature_at(3), 'm2', 'master', 'master', [FileChange('m.txt', b'2')]
    )
    f2 = docrepo.save(
        signature_at(4), 'f2', 'feature', 'feature', [FileChange('f.txt', b'2')]
    )
    return docrepo, (base, m1, f1, m2, f2)


def test_commits_all_branches(branched):
    repo, (base, m1, f1, m2, f2) = branched
    revs = repo.commits('', lambda m: True)
    ids = [r.id for r in revs]
    # shared revisions are reported once
    assert ids == [f2, m2, f1, m1, base]
    timestamps = [r.timestamp for r in revs]
    assert all(a > b for a, b in zip(timestamps, timestamps[1:]))
    # no filter is the same as accepting all
    assert repo.commits() == revs


def test_commits_single_branch(branched):
    repo, (base, m1, f1, m2, f2) = branched
    assert [r.id for r in repo.commits('master')] == [m2, m1, base]
    assert [r.id for r in repo.commits('feature')] == [f2, f1, m1, base]


def test_commits_filter(branched):
    repo, (base, m1, f1, m2, f2) = branched
    assert [r.id for r in repo.commits('', lambda m: m.startswith('f'))] == [f2, f1]
    # the ancestors of a rejected revision are still visited
    assert [r.id for r in repo.commits('feature', lambda m: m != 'f1')] == [
        f2,
        m1,
        base,
    ]
    assert repo.commits('', lambda m: False) == []


def test_commits_revision_properties(branched):
    repo, (base, m1, f1, m2, f2) = branched
    rev = repo.commits('feature')[0]
    assert rev.id == f2
    assert rev.message == 'f2'
    assert rev.parent_ids == (f1,)
    assert rev == repo.get_revision(f2)


def test_commits_unknown_branch(docrepo):
    with pytest.raises(NotFound, match='branch not found'):
        docrepo.commits('nope')

from datetime import (
    datetime,
    timezone,
)

import pytest

from revstore.runners import (
    call_git_lines,
    call_git_oneline,
)

from ..origin import OriginRepo
from ..workcopy import WorkingCopy


def _commit(wc, msg, **kwargs):
    wc.stage_all()
    wc.commit(msg, name='Tester', email='tester@example.com', **kwargs)


@pytest.fixture
def origin(tmp_path):
    path = tmp_path / 'origin.git'
    path.mkdir()
    return OriginRepo.init_at(path, 'master')


@pytest.fixture
def workcopy(origin, tmp_path):
    """Working copy of an origin with one commit on ``master``"""
    wc = WorkingCopy.clone_from(origin, tmp_path / 'wc')
    wc.set_head_branch('master')
    (wc.path / 'file.txt').write_text('one')
    _commit(wc, 'first')
    wc.push('HEAD:refs/heads/master')
    return wc


def test_workingcopy(workcopy):
    wc = workcopy
    assert str(wc) == f'WorkingCopy({wc.path})'
    assert WorkingCopy(wc.path) is wc
    assert wc.git_dir == wc.path / '.git'
    assert wc.current_branch() == 'master'
    assert wc.local_branch_exists('master')
    assert wc.remote_branch_exists('master')
    assert not wc.remote_branch_exists('other')


def test_workingcopy_error(tmp_path, workcopy):
    err_match = 'not point to an existing Git worktree/checkout'
    with pytest.raises(ValueError, match=err_match):
        WorkingCopy(tmp_path / 'notexist')
    # must be the root of the checkout
    subdir = workcopy.path / 'sub'
    subdir.mkdir()
    with pytest.raises(ValueError, match='not the root'):
        WorkingCopy(subdir)


def test_workingcopy_commit(workcopy):
    wc = workcopy
    when = datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    _commit(wc, 'nothing changed', date=when)
    assert call_git_oneline(
        ['log', '-1', '--format=%an|%ae|%cn|%aI|%s'],
        cwd=wc.path,
    ) == 'Tester|tester@example.com|Tester|2024-02-03T04:05:06+00:00|nothing changed'
    # empty message is fine too
    _commit(wc, '')
    assert call_git_oneline(['rev-list', '--count', 'HEAD'], cwd=wc.path) == '3'


def test_workingcopy_branches(workcopy):
    wc = workcopy
    wc.checkout_new_branch('side', 'master')
    assert wc.current_branch() == 'side'
    (wc.path / 'side.txt').write_text('side')
    _commit(wc, 'side commit')
    wc.push('HEAD:refs/heads/side')
    wc.checkout('master')
    assert not (wc.path / 'side.txt').exists()
    # move a branch that is not checked out
    wc.move_branch('side', 'master')
    assert wc.resolve_commit('side') == wc.resolve_commit('master')
    wc.delete_local_branch('side')
    assert not wc.local_branch_exists('side')
    # it is still in the origin
    wc.fetch()
    assert wc.remote_branch_exists('side')
    wc.push_delete('refs/heads/side')
    wc.fetch()
    assert not wc.remote_branch_exists('side')
    # detached checkout
    tip = wc.resolve_commit('master')
    wc.checkout(tip, detach=True)
    assert wc.current_branch() is None


def test_workingcopy_reset_and_clean(workcopy):
    wc = workcopy
    (wc.path / 'file.txt').write_text('modified')
    (wc.path / 'untracked').mkdir()
    (wc.path / 'untracked' / 'new.txt').write_text('new')
    wc.reset_hard('master')
    wc.clean()
    assert (wc.path / 'file.txt').read_text() == 'one'
    assert not (wc.path / 'untracked').exists()
    assert call_git_lines(['status', '--porcelain'], cwd=wc.path) == []

    wc.remove_tracked()
    assert not (wc.path / 'file.txt').exists()


def test_workingcopy_tags(origin, workcopy):
    wc = workcopy
    tip = wc.resolve_commit('HEAD')
    wc.create_tag('v1', tip)
    assert wc.local_tag_exists('v1')
    wc.push('refs/tags/v1')
    assert origin.get_tag_commit('v1') == tip
    wc.delete_local_tag('v1')
    assert not wc.local_tag_exists('v1')
    # fetch mirrors the origin's tags
    wc.fetch()
    assert wc.local_tag_exists('v1')
    wc.push_delete('refs/tags/v1')
    wc.fetch()
    assert not wc.local_tag_exists('v1')
    assert not origin.tag_exists('v1')


def test_workingcopy_clone_branch(origin, workcopy, tmp_path_factory):
    workcopy.checkout_new_branch('other', 'master')
    workcopy.push('HEAD:refs/heads/other')
    path = tmp_path_factory.mktemp('clone') / 'wc'
    wc = WorkingCopy.clone_from(origin, path, branch='other')
    assert wc.current_branch() == 'other'

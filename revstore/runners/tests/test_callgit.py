import pytest

from .. import (
    CommandError,
    TimeoutExceeded,
    call_git,
    call_git_bytes,
    call_git_lines,
    call_git_oneline,
    call_git_success,
)


def test_call_git(tmp_path):
    # does not hide fundamental errors
    with pytest.raises((FileNotFoundError, NotADirectoryError)):
        call_git(['init'], cwd=tmp_path / 'nothere')

    call_git(['init'], cwd=tmp_path, capture_output=True)
    assert (tmp_path / '.git').is_dir()

    with pytest.raises(CommandError) as e:
        call_git(['rev-parse', '--verify', 'HEAD'], cwd=tmp_path, capture_output=True)
    assert e.value.returncode
    assert e.value.cwd == tmp_path
    assert 'rev-parse' in e.value.cmd


def test_call_git_success(tmp_path):
    assert call_git_success(['--version'], capture_output=True)
    assert not call_git_success(
        ['rev-parse', '--git-dir'],
        cwd=tmp_path,
        capture_output=True,
    )


def test_call_git_lines(baregitrepo):
    assert call_git_lines(
        ['rev-parse', '--is-bare-repository', '--is-inside-work-tree'],
        cwd=baregitrepo,
    ) == ['true', 'false']
    assert call_git_oneline(
        ['rev-parse', '--is-bare-repository'],
        cwd=baregitrepo,
    ) == 'true'
    with pytest.raises(AssertionError, match='single line'):
        call_git_oneline(
            ['rev-parse', '--is-bare-repository', '--is-inside-work-tree'],
            cwd=baregitrepo,
        )


def test_call_git_bytes(gitrepo):
    (gitrepo / 'blob').write_bytes(b'\x00\x01binary')
    sha = call_git_oneline(['hash-object', '-w', 'blob'], cwd=gitrepo)
    assert call_git_bytes(['cat-file', 'blob', sha], cwd=gitrepo) == b'\x00\x01binary'


def test_call_git_timeout(tmp_path):
    snooze = ['-c', 'alias.snooze=!sleep 5', 'snooze']
    with pytest.raises(TimeoutExceeded) as e:
        call_git(snooze, cwd=tmp_path, capture_output=True, timeout=0.5)
    assert e.value.timeout == 0.5  # noqa: PLR2004
    assert 'no exit after' in e.value.msg
    # a timeout is an execution error too
    assert isinstance(e.value, CommandError)
    # and it is not reported as a mere failure
    with pytest.raises(TimeoutExceeded):
        call_git_success(snooze, cwd=tmp_path, capture_output=True, timeout=0.5)

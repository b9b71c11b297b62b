from __future__ import annotations

import logging
import os
import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

from datasalad.runners import CommandError

from revstore.exceptions import TimeoutExceeded

lgr = logging.getLogger('revstore.runners')

# make configurable
_git_executable = 'git'


def _call_git(
    args: list[str],
    *,
    capture_output: bool = False,
    cwd: Path | None = None,
    check: bool = False,
    text: bool | None = None,
    inputs: str | bytes | None = None,
    force_c_locale: bool = False,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """Run Git with ``args`` via ``subprocess.run()``

    The Git executable is put in front of ``args``, which must therefore
    not include it.

    ``force_c_locale`` runs Git with ``LC_ALL=C``, for output that is
    parsed and must not be translated.

    A process that runs longer than ``timeout`` seconds is killed, and
    reported with ``TimeoutExceeded``. With ``check``, a non-zero exit is
    reported with ``CommandError``. Anything else is given to
    ``subprocess.run()`` as is.
    """
    env = dict(os.environ, LC_ALL='C') if force_c_locale else None
    cmd = [_git_executable, *args]
    try:
        return subprocess.run(
            cmd,
            capture_output=capture_output,
            cwd=cwd,
            check=check,
            text=text,
            input=inputs,
            env=env,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        raise CommandError(
            cmd=cmd,
            returncode=e.returncode,
            stdout=e.stdout,
            stderr=e.stderr,
            cwd=cwd,
        ) from e
    except subprocess.TimeoutExpired as e:
        # the process is dead at this point
        raise TimeoutExceeded(
            cmd=cmd,
            msg=f'no exit after {timeout} seconds',
            stdout=e.stdout or '',
            stderr=e.stderr or '',
            cwd=cwd,
            timeout=timeout,
        ) from e


def call_git(
    args: list[str],
    *,
    cwd: Path | None = None,
    force_c_locale: bool = False,
    capture_output: bool = False,
    timeout: float | None = None,
) -> None:
    """Run Git for its side effects

    Git runs in ``cwd``, if given. Output goes to the terminal, unless
    ``capture_output`` is set. Only captured output can be reported by
    the ``CommandError`` that is raised when Git exits with a non-zero
    status.

    See :func:`_call_git` for ``force_c_locale`` and ``timeout``.
    """
    _call_git(
        args,
        capture_output=capture_output,
        cwd=cwd,
        check=True,
        force_c_locale=force_c_locale,
        timeout=timeout,
    )


def call_git_success(
    args: list[str],
    *,
    cwd: Path | None = None,
    capture_output: bool = False,
    timeout: float | None = None,
) -> bool:
    """Run Git, and return whether it exited with status zero

    Arguments are the same as for :func:`call_git`. A ``TimeoutExceeded``
    is not a failure of the command, and is raised.
    """
    try:
        _call_git(
            args,
            capture_output=capture_output,
            cwd=cwd,
            check=True,
            timeout=timeout,
        )
    except TimeoutExceeded:
        raise
    except CommandError:
        lgr.debug('call_git_success() failed with exception', exc_info=True)
        return False
    return True


def call_git_lines(
    args: list[str],
    *,
    cwd: Path | None = None,
    inputs: str | None = None,
    force_c_locale: bool = False,
    timeout: float | None = None,
) -> list[str]:
    """Run Git, and return its standard output as a list of lines

    Only suitable for small output, it is read into memory at once.
    ``inputs`` is passed to Git's standard input, when given. See
    :func:`call_git` for all other arguments.

    Raises
    ------
    CommandError
      On a non-zero exit.
    TimeoutExceeded
      When Git did not exit within ``timeout`` seconds.
    """
    res = _call_git(
        args,
        capture_output=True,
        cwd=cwd,
        check=True,
        text=True,
        inputs=inputs,
        force_c_locale=force_c_locale,
        timeout=timeout,
    )
    return res.stdout.splitlines()


def call_git_oneline(
    args: list[str],
    *,
    cwd: Path | None = None,
    inputs: str | None = None,
    force_c_locale: bool = False,
    timeout: float | None = None,
) -> str:
    """Like :func:`call_git_lines`, for output of exactly one line

    Raises
    ------
    CommandError
      On a non-zero exit.
    TimeoutExceeded
      When Git did not exit within ``timeout`` seconds.
    AssertionError
      When Git reported more than one line.
    """
    lines = call_git_lines(
        args,
        cwd=cwd,
        inputs=inputs,
        force_c_locale=force_c_locale,
        timeout=timeout,
    )
    if len(lines) > 1:
        msg = f'Expected Git {args} to return a single line, but got {lines}'
        raise AssertionError(msg)
    return lines[0]


def call_git_bytes(
    args: list[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> bytes:
    """Run Git, and return its standard output undecoded

    For binary output (file content from ``git cat-file``), and for output
    the caller splits itself (zero-byte delimited records).

    Raises
    ------
    CommandError
      On a non-zero exit.
    TimeoutExceeded
      When Git did not exit within ``timeout`` seconds.
    """
    res = _call_git(
        args,
        capture_output=True,
        cwd=cwd,
        check=True,
        timeout=timeout,
    )
    return res.stdout

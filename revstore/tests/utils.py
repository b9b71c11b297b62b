from __future__ import annotations

from datetime import (
    datetime,
    timedelta,
    timezone,
)
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import (
        Path,
        PurePath,
    )

from revstore.runners import call_git
from revstore.store.types import Signature

# all test commits are dated relative to this point in time, such that
# the order of revisions by timestamp is known
epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

tester_name = 'Revstore Tester'
tester_email = 'tester@example.com'


def signature_at(minutes: int) -> Signature:
    """Return the test identity with a date ``minutes`` after ``epoch``"""
    return Signature(
        name=tester_name,
        email=tester_email,
        when=epoch + timedelta(minutes=minutes),
    )


def call_git_addcommit(
    cwd: Path,
    paths: list[str | PurePath] | None = None,
    *,
    msg: str | None = None,
):
    if paths is None:
        paths = ['.']

    if msg is None:
        msg = 'done by call_git_addcommit()'

    call_git(['add'] + [str(p) for p in paths], cwd=cwd, capture_output=True)
    call_git(
        [
            '-c',
            f'user.name={tester_name}',
            '-c',
            f'user.email={tester_email}',
            'commit',
            '--no-gpg-sign',
            '-m',
            msg,
        ],
        cwd=cwd,
        capture_output=True,
    )

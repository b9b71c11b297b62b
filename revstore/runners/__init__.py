"""Execution of git subprocesses

This module provides the external-command facility used for every
interaction with Git. Each function runs a single ``git`` command with
captured output, in an optional working directory, and with an optional
time limit. Execution errors are communicated with the
:class:`~revstore.runners.CommandError` exception; an exceeded time limit
is reported by its :class:`~revstore.runners.TimeoutExceeded` subclass.

.. currentmodule:: revstore.runners
.. autosummary::
   :toctree: generated

   call_git
   call_git_bytes
   call_git_lines
   call_git_oneline
   call_git_success
   CommandError
   TimeoutExceeded
"""

__all__ = [
    'CommandError',
    'TimeoutExceeded',
    'call_git',
    'call_git_bytes',
    'call_git_lines',
    'call_git_oneline',
    'call_git_success',
]


from datasalad.runners import CommandError

from revstore.exceptions import TimeoutExceeded

from .git import (
    call_git,
    call_git_bytes,
    call_git_lines,
    call_git_oneline,
    call_git_success,
)

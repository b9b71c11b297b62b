"""Fixtures and utilities for testing"""

__all__ = [
    'call_git_addcommit',
    'epoch',
    'signature_at',
]

from .utils import (
    call_git_addcommit,
    epoch,
    signature_at,
)

"""Shared utilities for the meal coach backend.

This package contains reusable utilities that are shared across
multiple route files.
"""

from mealcoach.utils.auth import (
    create_access_token,
    token_required,
    token_optional
)

__all__ = [
    'create_access_token',
    'token_required',
    'token_optional',
]

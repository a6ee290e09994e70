"""Utility modules."""

from motoshop.utils.auth import get_current_user, verify_api_key

__all__ = ["get_current_user", "verify_api_key"]

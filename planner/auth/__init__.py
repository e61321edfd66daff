"""Password gate package."""

from planner.auth.session import Session, validate_password

__all__ = ["Session", "validate_password"]

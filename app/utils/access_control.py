"""
Role and ownership checks.

Routes call these before touching the database, so a rejected request never
gets as far as a mutation.
"""
from app.models.review import Review
from app.models.user import User
from app.utils.errors import ForbiddenError, ValidationError


def ensure_admin(user: User) -> None:
    """Only admins may change the custom catalog"""
    if not user or not user.is_admin:
        raise ForbiddenError("Admin access required")


def ensure_owner(user: User, review: Review) -> None:
    if review.user_id != user.id:
        raise ForbiddenError("You can only update your own reviews")


def ensure_owner_or_admin(user: User, review: Review) -> None:
    if review.user_id != user.id and not user.is_admin:
        raise ForbiddenError("You can only delete your own reviews")


def ensure_not_author(user: User, review: Review) -> None:
    """Authors cannot vote on their own reviews"""
    if review.user_id == user.id:
        raise ValidationError("You cannot mark your own review as helpful")

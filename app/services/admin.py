# app/services/admin.py
import logging

from sqlalchemy.orm import Session

from app.core.decorator import GuardViolation, NotFoundError, db_exception
from app.core.hasher import PasswordHelper
from app.models.user import User
from app.schemas.auth import AdminRegistrationRequest, UserRole

logger = logging.getLogger(__name__)


class AdminServices:

    def __init__(self):
        pass

    @db_exception
    def register_admin(
        self, request: AdminRegistrationRequest, created_by: User, db: Session
    ) -> User:
        if db.query(User).filter(User.email == request.email).first():
            raise GuardViolation("Email is already registered", "email_taken")

        admin = User(
            name=request.name,
            email=request.email,
            hashed_password=PasswordHelper.hash_password(request.password),
            role=UserRole.admin.value,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.info(f"Admin {admin.id} registered by admin {created_by.id}")
        return admin

    @db_exception
    def assign_role(
        self, user_id: int, role: UserRole, acting_admin: User, db: Session
    ) -> User:
        """Promote a user to admin or demote back to student."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found", "user_not_found")
        if user.id == acting_admin.id and role != UserRole.admin:
            raise GuardViolation("You cannot remove your own admin role", "cannot_demote_self")

        user.role = role.value
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} role set to {user.role} by admin {acting_admin.id}")
        return user

# app/services/auth.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.decorator import GuardViolation, db_exception
from app.core.hasher import PasswordHelper
from app.core.security import jwt_manager
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    UserRegistrationRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    def _issue(self, user: User, message: str) -> AuthResponse:
        token = jwt_manager.create_access_token(user)
        return AuthResponse(
            success=True,
            access_token=token,
            expires_in=int(jwt_manager.token_lifetime(user).total_seconds()),
            user=UserResponse.model_validate(user),
            message=message,
        )

    @db_exception
    def register_user(self, request: UserRegistrationRequest, db: Session) -> AuthResponse:
        existing = db.query(User).filter(User.email == request.email).first()
        if existing:
            raise GuardViolation("Email is already registered", "email_taken")

        user = User(
            name=request.name,
            email=request.email,
            hashed_password=PasswordHelper.hash_password(request.password),
            role="student",
            last_login=datetime.now(timezone.utc),
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"✓ User registered: {user.id}")
        return self._issue(user, "Registration successful")

    @db_exception
    def login(self, request: LoginRequest, db: Session) -> AuthResponse:
        user = db.query(User).filter(User.email == request.email).first()
        if not user or not PasswordHelper.check_password(
            request.password, user.hashed_password
        ):
            logger.warning(f"Failed login attempt for {request.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user"
            )

        user.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)

        return self._issue(user, "Login successful")

    @db_exception
    def update_profile(self, user: User, request: ProfileUpdate, db: Session) -> User:
        user.name = request.name
        db.commit()
        db.refresh(user)

        logger.info(f"Profile updated for user {user.id}")
        return user


auth_service = AuthService()

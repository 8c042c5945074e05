from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.user import User, UserRole
from app.schemas.auth import UserRegister, UserLogin, ProfileUpdate
from app.utils.errors import ConflictError
from app.utils.security import hash_password, verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from fastapi import HTTPException, status
from datetime import timedelta
import logging
from typing import cast

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def issue_token(user: User) -> dict:
        access_token = create_access_token(
            data={"sub": user.email, "user_id": user.id},
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        return {
            "token": access_token,
            "token_type": "bearer",
            "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user": user
        }

    @staticmethod
    def create_user(db: Session, email: str, password: str, name: str, role: UserRole = UserRole.USER) -> User:
        """Insert a user; the unique email index turns a racing duplicate into a conflict"""
        new_user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role.value
        )
        db.add(new_user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("User with this email already exists")
        db.refresh(new_user)
        return new_user

    @staticmethod
    def register_user(db: Session, user_data: UserRegister) -> User:
        # Check existing email
        existing_user = db.query(User).filter(User.email == user_data.email).first()
        if existing_user:
            raise ConflictError("User with this email already exists")

        # Self-registration always creates a regular account
        user = AuthService.create_user(db, user_data.email, user_data.password, user_data.name)
        logger.info(f"User registered: id={user.id}")
        return user

    @staticmethod
    def login_user(db: Session, credentials: UserLogin) -> dict:
        # Find user
        user = db.query(User).filter(User.email == credentials.email).first()

        if not user:
            logger.warning(f"Login failed: User not found with email {credentials.email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

        if not verify_password(credentials.password, str(user.password_hash)):
            logger.warning(f"Login failed: Incorrect password for email {credentials.email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
        # Cast is_active to bool to satisfy static type checking tools
        if not cast(bool, user.is_active):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

        return AuthService.issue_token(user)

    @staticmethod
    def update_profile(db: Session, user: User, update_data: ProfileUpdate) -> User:
        """Change the user's own name and/or email"""
        if update_data.email and update_data.email != user.email:
            taken = db.query(User).filter(User.email == update_data.email, User.id != user.id).first()
            if taken:
                raise ConflictError("Email is already taken")
            user.email = update_data.email

        if update_data.name:
            user.name = update_data.name

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email is already taken")
        db.refresh(user)
        return user

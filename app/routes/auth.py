from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    ProfileUpdate,
    AuthResponse,
    UserEnvelope,
    MessageResponse,
)
from app.services.auth_service import AuthService
from app.utils.dependencies import get_current_user
from app.models.user import User

# Define router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Register a new user
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user and log them in"""
    user = AuthService.register_user(db, user_data)
    return {**AuthService.issue_token(user), "message": "Registration successful"}

# Login endpoint
@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login with email and password"""
    return {**AuthService.login_user(db, credentials), "message": "Login successful"}

# Check that a token is still valid
@router.get("/verify", response_model=UserEnvelope)
def verify(current_user: User = Depends(get_current_user)):
    """Token is valid if the dependency let us through"""
    return {"user": current_user, "message": "Token is valid"}


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    """
    Tokens are stateless; the client drops its copy.
    """
    return {"message": "Logout successful"}

# Get current authenticated user
@router.get("/profile", response_model=UserEnvelope)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return {"user": current_user}


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    update_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update name and/or email of the current user"""
    user = AuthService.update_profile(db, current_user, update_data)
    return {"user": user, "message": "Profile updated successfully"}

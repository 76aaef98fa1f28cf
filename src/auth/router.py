from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from src.database import get_db
from src.auth.schemas import UserCreate, User, LoginRequest, AuthResponse, Principal
from src.auth.service import UserService
from src.auth.utils import create_access_token
from src.auth.dependencies import get_current_principal
from src.exceptions import AuthenticationError, NotFoundError

router = APIRouter()

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user"""
    return UserService.create_user(db=db, user=user)

@router.post("/login", response_model=AuthResponse)
def login_user(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Log in and receive a bearer token"""
    user = UserService.authenticate_user(db, login_data)
    if not user:
        raise AuthenticationError("Invalid email or password")

    access_token = create_access_token(
        data={"sub": str(user.id), "name": user.name, "role": user.role}
    )
    return AuthResponse(access_token=access_token, user=User.model_validate(user))

@router.get("/profile", response_model=User)
def read_user_profile(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    """Get current user profile"""
    user = UserService.get_user_by_id(db, principal.id)
    if not user:
        raise NotFoundError("User not found")
    return user

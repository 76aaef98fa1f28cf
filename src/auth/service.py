from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from src.models import User
from src.auth.schemas import UserCreate, LoginRequest
from src.auth.utils import get_password_hash, verify_password
from src.exceptions import ValidationError
from src.logger import logger
from typing import Optional

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Create a new user"""
        existing = db.query(User).filter(
            or_(User.email == user.email, User.name == user.name)
        ).first()
        if existing:
            raise ValidationError("User already exists")

        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password),
            role=user.role.value
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ValidationError("User already exists")

        logger.info(f"Registered {db_user.role} user '{db_user.name}'")
        return db_user

    @staticmethod
    def authenticate_user(db: Session, login_data: LoginRequest) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, login_data.email)
        if not user:
            return None
        if not verify_password(login_data.password, user.password):
            return None
        return user

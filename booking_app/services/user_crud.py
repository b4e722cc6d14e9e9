from typing import Optional
from sqlalchemy.orm import Session
from booking_app.errors import NotFoundError, Reason, ValidationError
from booking_app.models.user_model import User
from booking_app.schemas.user_schema import UserCreate
from booking_app.security.auth import get_password_hash
from booking_app.logger import get_logger

logger = get_logger(__name__)


class UserCRUD:
    @staticmethod
    def get_user_by_id(db: Session, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return db.query(User).filter(User.id == str(user_id)).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_users_by_ids(db: Session, user_ids) -> dict:
        """Map of id -> user for every id that resolves"""
        ids = {str(user_id) for user_id in user_ids if user_id}
        if not ids:
            return {}
        users = db.query(User).filter(User.id.in_(ids)).all()
        return {user.id: user for user in users}

    @staticmethod
    def create_user(db: Session, user: UserCreate, role: str = "user") -> User:
        if not user.name or not user.email or not user.password:
            raise ValidationError(Reason.missing_fields)

        if UserCRUD.get_user_by_email(db, user.email):
            raise ValidationError(Reason.email_exists)

        db_user = User(
            name=user.name,
            email=user.email,
            password_hash=get_password_hash(user.password),
            role=role,
        )
        try:
            db.add(db_user)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_user)
        logger.info(f"User created: {db_user.email} ({db_user.role})")
        return db_user

    @staticmethod
    def require_user(db: Session, user_id: str) -> User:
        user = UserCRUD.get_user_by_id(db, user_id)
        if not user:
            raise NotFoundError(Reason.user_not_found)
        return user


user_crud = UserCRUD()

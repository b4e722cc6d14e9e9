from sqlalchemy.orm import Session
from booking_app.errors import NotFoundError, Reason, ValidationError
from booking_app.schemas.user_schema import LoginResponse, UserLogin
from booking_app.security.auth import create_access_token, verify_password
from booking_app.services.user_crud import user_crud
from booking_app.logger import get_logger

logger = get_logger(__name__)


class UserService:
    @staticmethod
    def login_user(db: Session, user_login: UserLogin) -> LoginResponse:
        if not user_login.email or not user_login.password:
            raise ValidationError(Reason.missing_fields)

        user = user_crud.get_user_by_email(db, user_login.email)
        if not user:
            logger.warning(f"Login attempt for unknown email: {user_login.email}")
            raise NotFoundError(Reason.user_not_found)

        if not verify_password(user_login.password, user.password_hash):
            logger.warning(f"Failed login attempt for email: {user_login.email}")
            raise ValidationError(Reason.wrong_password)

        access_token, _ = create_access_token(data={"sub": str(user.id)})

        logger.info(f"User logged in: {user_login.email}")
        return LoginResponse(
            message="Login successful",
            user_id=str(user.id),
            role=user.role,
            access_token=access_token,
            token_type="bearer",
        )


user_app_service = UserService()

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from booking_app.database import get_db
from booking_app.errors import BookingAppError, InfrastructureError
from booking_app.schemas.booking_schema import MessageResponse
from booking_app.schemas.user_schema import LoginResponse, UserCreate, UserLogin
from booking_app.services.user_crud import user_crud
from booking_app.utils.user_app_service import user_app_service
from booking_app.logger import get_logger

user_router = APIRouter()
logger = get_logger(__name__)


@user_router.post("/register", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user account"""
    try:
        logger.info(f"Registering user: {user.email}")
        user_crud.create_user(db, user)
        return MessageResponse(message="User registered successfully")

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error registering user {user.email}: {str(e)}")
        raise InfrastructureError()


@user_router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login_user(user_login: UserLogin, db: Session = Depends(get_db)):
    """Check credentials and hand out an access token"""
    try:
        logger.info(f"Login attempt for user: {user_login.email}")
        return user_app_service.login_user(db, user_login)

    except BookingAppError:
        raise
    except Exception as e:
        logger.error(f"Error during login for {user_login.email}: {str(e)}")
        raise InfrastructureError()

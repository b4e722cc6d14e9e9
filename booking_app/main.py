from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from booking_app.config import settings
from booking_app.database import Base, engine
from booking_app.errors import STATUS_CODES, AuthError, BookingAppError, InfrastructureError, Reason, error_body
from booking_app.middleware import add_request_id_and_process_time
from booking_app.routes.admin_route import admin_router
from booking_app.routes.booking_route import booking_router
from booking_app.routes.user_route import user_router
from booking_app.logger import get_logger

logger = get_logger(__name__)

Base.metadata.create_all(bind=engine)
app = FastAPI(
    title="Appointment Booking API",
    version="1.0.0",
    description="Users book weekday appointment slots; administrators review, edit and annotate them.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(add_request_id_and_process_time)


@app.exception_handler(BookingAppError)
async def booking_app_error_handler(request: Request, exc: BookingAppError):
    # Gate and server failures always carry their status code
    if isinstance(exc, (AuthError, InfrastructureError)) or not settings.SOFT_FAILURES:
        status_code = exc.status_code
    else:
        status_code = 200
    return JSONResponse(status_code=status_code, content=error_body(exc.reason, exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # A missing body or field is a missing_fields outcome; anything else is a bad shape
    errors = exc.errors()
    if any(error.get("type") == "missing" for error in errors):
        reason = Reason.missing_fields
    else:
        reason = Reason.invalid_format
    logger.info(f"Rejected request on {request.method} {request.url.path}: {reason.value}")
    status_code = STATUS_CODES[reason] if not settings.SOFT_FAILURES else 200
    return JSONResponse(status_code=status_code, content=error_body(reason))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content=error_body(Reason.server_error))


@app.get("/", status_code=200)
async def home():
    return {"ok": True, "message": "Backend is working"}


app.include_router(user_router, prefix="/api", tags=["Users"])
app.include_router(booking_router, prefix="/api", tags=["Bookings"])
app.include_router(admin_router, prefix="/api", tags=["Admin"])

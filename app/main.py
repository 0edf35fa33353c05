import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from config import DEBUG, APP_HOST, APP_PORT, CORS_ORIGINS, SEED_DEFAULT_ADMIN
from database.init import Base, SessionLocal, engine
from routes import (
    auth_routes,
    user_routes,
    property_routes,
    company_routes,
    ticket_routes,
    notification_routes,
)
from services.notifications.dispatcher import build_dispatcher
from services.seed_service import seed_default_owner
from utils.exceptions import TicketingError
from utils.logger import setup_logging

from responses.base import build_response
from responses.error import bad_request_error, error_from_exception
from responses.success import data_response

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Tenant Ticketing API")
app.state.dispatcher = build_dispatcher()

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(property_routes.router)
app.include_router(company_routes.router)
app.include_router(ticket_routes.router)
app.include_router(notification_routes.router)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


@app.exception_handler(TicketingError)
async def ticketing_error_handler(request: Request, exc: TicketingError):
    return error_from_exception(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return bad_request_error("Validation failed", details=details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    response = build_response(
        exc.status_code,
        False,
        message=str(exc.detail),
        error=HTTP_ERROR_CODES.get(exc.status_code, "error"),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.on_event("startup")
def seed_owner_account():
    if not SEED_DEFAULT_ADMIN:
        return
    db = SessionLocal()
    try:
        seed_default_owner(db)
    except Exception:
        logger.exception("Failed to seed the default owner account")
    finally:
        SessionLocal.remove()


@app.get("/health")
def health():
    return data_response({"status": "ok", "service": "tenant-ticketing"}, "Service is healthy")


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from custody.core import messages
from custody.core.config import settings
from custody.core.logging_config import configure_logging
from custody.db.session import init_db

from custody.api.auth import router as auth_router
from custody.api.health import router as health_router
from custody.api.reference_data import router as reference_data_router
from custody.api.sheets import router as sheets_router
from custody.api.users import router as users_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database initialized")
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ERRORS -> {"error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": messages.INVALID_INPUT,
            # input/ctx may hold values JSON cannot carry (NaN, Infinity)
            "details": jsonable_encoder(
                [
                    {key: error[key] for key in ("loc", "msg", "type") if key in error}
                    for error in exc.errors()
                ]
            ),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": messages.INTERNAL_ERROR},
    )


# ROUTERS
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(sheets_router, prefix="/api/sheets", tags=["sheets"])
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(reference_data_router, prefix="/api", tags=["reference-data"])
app.include_router(health_router, prefix="/api", tags=["health"])

# app/main.py
import os
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from tortoise.exceptions import BaseORMException

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import ChatError, InternalError, ValidationError
from app.core.limits import BodySizeLimitMiddleware

from app.api.v1.routers import auth, message

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# Raw body ceiling (MAX_BODY_BYTES); added first so CORS wraps its 413
app.add_middleware(BodySizeLimitMiddleware)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===== Error envelope =====
def _error_response(err: ChatError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content={"success": False, "error": err.to_dict()})

@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    return _error_response(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    where = ".".join(str(p) for p in errors[0].get("loc", ())) if errors else "body"
    return _error_response(ValidationError(f"Invalid request field: {where}"))

@app.exception_handler(BaseORMException)
async def store_error_handler(request: Request, exc: BaseORMException):
    # Full detail stays in the server log
    logger.exception("[db] store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(InternalError())

@app.on_event("startup")
async def on_startup():
    if settings.env != "dev" and settings.jwt_secret == "dev-secret":
        logger.warning("[app] JWT_SECRET is not set; sessions are signed with the development secret")
    await init_db(generate_schemas=settings.db_generate_schemas)
    logger.info("[app] %s started (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api")
app.include_router(message.router, prefix="/api")

# Images written by the local blob store
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

@app.get("/healthz")
def healthz():
    return {"ok": True}

import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quest_api.apple_health.webhook import router as webhook_router
from quest_api.auth.routes import router as auth_router
from quest_api.config import ALLOWED_ORIGINS
from quest_api.core.exceptions import APIException
from quest_api.core.logging import setup_logging
from quest_api.core.rate_limit import build_rate_limiter
from quest_api.db.init_db import init_db
from quest_api.routes import users as users_routes
from quest_api.steps.routes import router as steps_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Quest to Mordor API", version="1.0.0")
app.include_router(auth_router)
app.include_router(steps_router)
app.include_router(users_routes.router)
app.include_router(webhook_router)

app.state.webhook_rate_limiter = build_rate_limiter()


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    content = {"error": exc.detail, "code": exc.error_code, **exc.extra}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message, "code": "VALIDATION_ERROR"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL_ERROR"})


@app.on_event("startup")
def startup_event():
    init_db()
    logger.info("Quest to Mordor API started")


@app.get("/")
def root():
    return {"message": "Quest to Mordor API", "version": app.version, "status": "running"}


@app.get("/health")
def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the internship application
tracker. Controllers are intentionally thin: they accept requests,
delegate to services, and translate domain errors into status codes.
Every error body has the shape `{"error": "<message>"}`.

Endpoints implemented:
- POST /auth/register
- POST /auth/login
- GET /applications
- POST /applications
- PATCH /applications/{id}
- DELETE /applications/{id}
- GET /stats
- GET /health
"""

import json
import logging
import time
import uuid

from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models, schemas, services
from .auth import get_current_user_id, issue_token
from .config import settings
from .database import create_db_and_tables, get_session
from .errors import TrackerError

app = FastAPI(title="Internship Application Tracker API")
logger = logging.getLogger("tracker.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render body/parameter validation failures as 400 with a short message."""
    message = "Invalid request body"
    errors = exc.errors()
    if errors:
        first = errors[0]
        fields = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        if first.get("type") == "json_invalid":
            message = "Malformed JSON body"
        elif fields:
            message = f"Invalid {'.'.join(fields)}"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled error request_id=%s", getattr(request.state, "request_id", ""), exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _parse_application_id(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid application id")
    if not models.is_storable_id(value):
        # no stored row can have this id
        raise HTTPException(status_code=404, detail="Application not found")
    return value


def _application_out(application: models.Application) -> schemas.ApplicationOut:
    return schemas.ApplicationOut.model_validate(application)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"ok": True}


@app.post("/auth/register", status_code=201, response_model=schemas.TokenOut)
def register(payload: schemas.CredentialsIn, db: Session = Depends(get_session)):
    """Register a new user and return a token for them.

    Emails are trimmed and lowercased, so `A@Test.com ` and `a@test.com`
    are the same account; the second registration gets 409.
    """
    auth = services.AuthService(db)
    try:
        user = auth.register(payload.email, payload.password)
    except TrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"token": issue_token(user.id)}


@app.post("/auth/login", response_model=schemas.TokenOut)
def login(payload: schemas.CredentialsIn, db: Session = Depends(get_session)):
    """Authenticate a user and return a signed token valid for 14 days."""
    auth = services.AuthService(db)
    try:
        token = auth.login(payload.email, payload.password)
    except TrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"token": token}


@app.get("/applications", response_model=schemas.ApplicationList)
def list_applications(db: Session = Depends(get_session), user_id: int = Depends(get_current_user_id)):
    """List the caller's applications, most recently updated first."""
    svc = services.ApplicationService(db)
    return {"applications": [_application_out(a) for a in svc.list(user_id)]}


@app.post("/applications", status_code=201, response_model=schemas.ApplicationEnvelope)
def create_application(
    payload: schemas.ApplicationCreate,
    db: Session = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
):
    """Create an application owned by the caller.

    `status` defaults to `applied`, `referral` to false and the optional
    text fields to empty strings.
    """
    svc = services.ApplicationService(db)
    try:
        application = svc.create(user_id, payload)
    except TrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"application": _application_out(application)}


@app.patch("/applications/{application_id}", response_model=schemas.ApplicationEnvelope)
def update_application(
    application_id: str,
    payload: schemas.ApplicationPatch,
    db: Session = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
):
    """Merge-patch an application; ids owned by someone else are 404."""
    app_id = _parse_application_id(application_id)
    svc = services.ApplicationService(db)
    try:
        application = svc.update(user_id, app_id, payload)
    except TrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"application": _application_out(application)}


@app.delete("/applications/{application_id}", status_code=204)
def delete_application(
    application_id: str,
    db: Session = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
):
    app_id = _parse_application_id(application_id)
    svc = services.ApplicationService(db)
    try:
        svc.delete(user_id, app_id)
    except TrackerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)


@app.get("/stats", response_model=schemas.StatsOut)
def stats(db: Session = Depends(get_session), user_id: int = Depends(get_current_user_id)):
    """Return application counts per status for the caller."""
    return services.StatsService(db).stats_for(user_id)

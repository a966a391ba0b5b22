import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

import models  # noqa: F401  registers every table on Base.metadata
from config import APP_NAME, APP_VERSION, CORS_ORIGINS
from database import Base, engine
from services.fcm_service import initialize_firebase_admin
from services.supabase_auth import AuthServiceError
from utils.logger import setup_api_logger

from routes import (
    auth,
    profiles,
    account,
    trips,
    itinerary,
    accommodation,
    transport,
    tickets,
    packing,
    documents,
    expenses,
    collaborators,
    share,
    exports,
    files,
    currency,
)

Base.metadata.create_all(bind=engine)

@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_firebase_admin()
    yield


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# setup file logger for API failures
api_logger = setup_api_logger()


async def _request_body(request) -> str:
    try:
        body = await request.body()
    except (RuntimeError, ClientDisconnect):
        # stream already consumed
        body = b""
    return body.decode("utf-8", errors="replace")


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    # log request info and stacktrace
    body = await _request_body(request)
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    api_logger.error("Unhandled exception on %s %s | body=%s | error=%s\n%s",
                     request.method, request.url.path, body, str(exc), tb)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    body = await _request_body(request)
    api_logger.warning("HTTPException on %s %s | status=%s | body=%s | detail=%s",
                       request.method, request.url.path, exc.status_code, body, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    api_logger.warning("Invalid request on %s %s | errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(AuthServiceError)
async def auth_service_exception_handler(request, exc: AuthServiceError):
    api_logger.warning("Auth service error on %s %s | status=%s | detail=%s",
                       request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok", "version": APP_VERSION}


app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(account.router)
app.include_router(trips.router)
app.include_router(itinerary.router)
app.include_router(accommodation.router)
app.include_router(transport.router)
app.include_router(tickets.router)
app.include_router(packing.router)
app.include_router(documents.router)
app.include_router(expenses.router)
app.include_router(collaborators.router)
app.include_router(collaborators.router2)
app.include_router(share.router)
app.include_router(share.router2)
app.include_router(exports.router)
app.include_router(files.router)
app.include_router(currency.router)

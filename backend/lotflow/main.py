import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lotflow.config import ALLOWED_ORIGINS, LOG_LEVEL
from lotflow.routers import flow

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def problem_response(status: int, title: str, detail: str | None = None) -> JSONResponse:
    payload: Dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status,
    }
    if detail:
        payload["detail"] = detail
    return JSONResponse(status_code=status, content=payload, media_type="application/problem+json")


app = FastAPI(title="LoT Flow API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else None
    return problem_response(exc.status_code, title=detail or "HTTP error", detail=detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return problem_response(400, title="Validation error", detail=str(exc.errors()))


app.include_router(flow.router, prefix="/api/lot", tags=["line-of-therapy"])


@app.get("/api/health")
async def health():
    return {"status": "ok"}

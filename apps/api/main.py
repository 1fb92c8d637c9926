from __future__ import annotations

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pinegenie import __version__

from .errors import build_error_payload
from .strategy import router as strategy_router

router = APIRouter()
API_VERSION = "1"


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "api_version": API_VERSION, "version": __version__}


app = FastAPI(title="Pine Genie Feedback API", docs_url="/api/docs", openapi_url="/api/openapi.json")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api", include_in_schema=False)
app.include_router(router, prefix="/api/v1")
app.include_router(strategy_router, prefix="/api", include_in_schema=False)
app.include_router(strategy_router, prefix="/api/v1")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and {"code", "message", "details"}.issubset(exc.detail):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    payload = build_error_payload(
        "http_error",
        str(exc.detail),
        {"detail": exc.detail},
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    payload = build_error_payload(
        "validation_error",
        "Request validation failed",
        {"errors": jsonable_errors(exc)},
    )
    return JSONResponse(status_code=422, content=payload)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    errors: list[dict[str, object]] = []
    for item in exc.errors():
        errors.append(
            {
                "loc": [str(part) for part in item.get("loc", ())],
                "msg": str(item.get("msg", "")),
                "type": str(item.get("type", "")),
            }
        )
    return errors

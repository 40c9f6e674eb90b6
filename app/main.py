# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .db import SalesStore
from .errors import AppError, ClientInputError
from .llm import ModelGateway
from .log import configure_logging, log_request
from .nl2sql import translate_question, validate_question
from .responses import client_error, server_error, success_response
from .validate import validate_sql

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    settings.require(port=False)
    with SalesStore(settings.db_path, settings.default_limit) as store:
        store.initialize()
        app.state.store = store
        app.state.gateway = ModelGateway(settings)
        yield


app = FastAPI(title="NL2SQL Sales API", lifespan=lifespan)


class QueryIn(BaseModel):
    query: Optional[str] = None


def get_store(request: Request) -> SalesStore:
    return request.app.state.store


def get_gateway(request: Request) -> ModelGateway:
    return request.app.state.gateway


store_dep = Annotated[SalesStore, Depends(get_store)]
gateway_dep = Annotated[ModelGateway, Depends(get_gateway)]


def read_question(q: Optional[QueryIn]) -> str:
    question = (q.query or "").strip() if q else ""
    if not question:
        raise ClientInputError("Query is required")
    if len(question) > settings.max_query_length:
        raise ClientInputError(
            f"Query can only be a maximum of {settings.max_query_length} characters"
        )
    return question


async def require_valid(gateway, question: str) -> str:
    verdict = await validate_question(gateway, question)
    if not verdict.ok:
        raise ClientInputError(
            f"Query is not a valid request for this database: {verdict.justification}"
        )
    return verdict.justification


# ---------- Middleware & handlers ----------

@app.middleware("http")
async def log_and_catch(request: Request, call_next):
    log_request(request)
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return server_error(request)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.is_client_error:
        return client_error(request, exc.message, exc.status_code)
    logger.error("%s: %s", type(exc).__name__, exc.detail or exc.message)
    return server_error(request, exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return client_error(request, "Invalid JSON format", 400)
    return client_error(request, "Invalid Request", 400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return client_error(request, "URL not found", 404)
    if exc.status_code >= 500:
        return server_error(request, str(exc.detail), exc.status_code)
    return client_error(request, str(exc.detail), exc.status_code)


# ---------- Routes ----------

@app.get("/health")
async def health(request: Request):
    return success_response(request, "I'm fine!")


@app.post("/query")
async def query(request: Request, gateway: gateway_dep, store: store_dep, q: Optional[QueryIn] = None):
    question = read_question(q)

    # 1) is this a sensible, schema-aligned question?
    await require_valid(gateway, question)

    # 2) LLM -> SQL
    translation = await translate_question(gateway, question)

    # 3) safety gate
    ok, msg, cleaned = validate_sql(translation.sql_statement)
    if not ok:
        raise ClientInputError(msg)

    # 4) execute (connection is query_only)
    cols, rows, truncated = store.run_sql(cleaned)
    return success_response(
        request,
        "Query executed successfully!",
        sqlQuery=cleaned,
        rows=rows,
        columns=cols,
        rowCount=len(rows),
        truncated=truncated,
        explanation=translation.explanation,
    )


@app.post("/validate")
async def validate(request: Request, gateway: gateway_dep, q: Optional[QueryIn] = None):
    question = read_question(q)
    justification = await require_valid(gateway, question)
    return success_response(request, "Query is valid!", justification=justification)


@app.post("/explain")
async def explain(request: Request, gateway: gateway_dep, q: Optional[QueryIn] = None):
    question = read_question(q)
    await require_valid(gateway, question)
    translation = await translate_question(gateway, question)
    return success_response(
        request,
        "Query translated successfully to SQL!",
        sqlQuery=translation.sql_statement,
        explanation=translation.explanation,
    )

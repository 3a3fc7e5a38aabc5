import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from config import load_config
from routes import users, relationships, forests, milestones, completions  # Import routers
from utils.auth import create_caller_token, get_auth_secret, get_token_minutes
from utils.errors import ErrorCode, LedgerError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init config, logging and DB
    config = load_config()  # Ensures config exists
    configure_logging(config["logging"]["level"])
    init_db()
    yield


app = FastAPI(
    title="Milestone Ledger",
    description="Milestone forests, prerequisite graphs and verified completions for learners",
    lifespan=lifespan,
)

# Include routers
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(relationships.router, prefix="/relationships", tags=["relationships"])
app.include_router(forests.router, prefix="/forests", tags=["forests"])
app.include_router(milestones.router, prefix="/milestones", tags=["milestones"])
app.include_router(completions.router, prefix="/completions", tags=["completions"])


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Rejected operations always answer with their single error code."""
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code.label)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies get a ledger code too: a bad role is InvalidUserRole, anything else InvalidParameters."""
    locations = [tuple(error.get("loc", ())) for error in exc.errors()]
    if ("body", "role") in locations:
        error = LedgerError(ErrorCode.INVALID_USER_ROLE)
    else:
        error = LedgerError(ErrorCode.INVALID_PARAMETERS)
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, error.code.label, locations)
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Milestone Ledger")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--issue-token", metavar="PRINCIPAL", help="Print a caller token for PRINCIPAL")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    config = load_config()  # Ensures config is copied if missing
    configure_logging(config["logging"]["level"])
    if args.init:
        init_db()
        print("DB initialized and config copied to ~/.milestoneledger/")
        sys.exit(0)
    if args.issue_token:
        secret = get_auth_secret()
        if not secret:
            print("Set [auth] secret or LEDGER_AUTH_SECRET first", file=sys.stderr)
            sys.exit(1)
        print(create_caller_token(args.issue_token, secret, get_token_minutes()))
        sys.exit(0)
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")

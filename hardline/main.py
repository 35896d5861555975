# --- imports ---
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import db
from .core import config
from .exceptions import HardLineError
from .services.cron_service import CronService
from .services.logging_service import configure_logging

from .api.users import router as users_api
from .api.fixed_expenses import router as fixed_expenses_api, system_router as system_api
from .api.transactions import router as transactions_api
from .api.stats import router as stats_api
from .api.budget import router as budget_api
from .api.shopping import router as shopping_api
from .api.prices import router as prices_api

# --- logging ---
configure_logging(config.LOG_DIR, production=config.IS_PRODUCTION)
logger = logging.getLogger(__name__)

# --- create app ---
app = FastAPI(title="HardLine", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_api)
app.include_router(fixed_expenses_api)
app.include_router(system_api)
app.include_router(transactions_api)
app.include_router(stats_api)
app.include_router(budget_api)
app.include_router(shopping_api)
app.include_router(prices_api)


@app.exception_handler(HardLineError)
async def _hardline_error_handler(request: Request, exc: HardLineError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
async def health():
    return {"status": "ok"}


# --- lifecycle: init DB and start/stop cron ---
@app.on_event("startup")
async def _on_startup() -> None:
    try:
        db.initialise_database()
    except Exception:
        logger.exception("Database initialization failed")
    if not config.CRON_ENABLED:
        logger.info("CronService disabled (CRON_ENABLED=0)")
        return
    try:
        cron = CronService()
        cron.start()
        app.state.cron = cron
    except Exception:
        logger.exception("CronService failed to start")


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    cron = getattr(app.state, "cron", None)
    if cron is not None:
        try:
            cron.stop()
        except Exception:
            logger.exception("CronService shutdown error")

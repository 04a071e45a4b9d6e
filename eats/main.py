from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from eats.routes import auth as auth_routes
from eats.routes import users as users_routes
from eats.routes import restaurants as restaurants_routes
from eats.routes import orders as orders_routes
from eats.routes import orders_stream as orders_stream_routes
from eats.routes import payments as payments_routes
from eats.db import session as db_session
from eats.core.config import settings
from eats.services.payments import run_promotion_sweep
from eats.utils.cron import start_daily_job
from eats.utils.pubsub import PubSub
import logging
import threading
from collections import defaultdict

app = FastAPI(
    title="Eats API",
    version="1.0.0",
    description="Food ordering backend: accounts, restaurants, orders and live order notifications",
    redirect_slashes=False,
)

# Configure logging level from env
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
# Use a dedicated app logger to avoid uvicorn.access formatter expectations
_req_logger = logging.getLogger("eats.request")

# In-memory request counters per route (method + path), guarded by a lock
_request_counts = defaultdict(int)
_req_lock = threading.Lock()

# process-wide bus; replaced on each startup so a restarted app gets a fresh one
app.state.pubsub = PubSub()
app.state.cron_tasks = []


@app.middleware("http")
async def request_count_middleware(request: Request, call_next):
    response = await call_next(request)
    # the router sets scope["route"] while handling; unmatched paths share one key
    route = request.scope.get("route")
    key_path = getattr(route, "path", None) or "<unmatched>"
    key = f"{request.method} {key_path}"

    with _req_lock:
        _request_counts[key] += 1
        count_val = _request_counts[key]

    # Log every N hits to avoid spam
    if count_val % settings.REQUEST_LOG_EVERY_N == 0:
        _req_logger.info(f"Request count threshold reached: {key} -> {count_val}")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(restaurants_routes.router)
app.include_router(restaurants_routes.dishes_router)
app.include_router(orders_stream_routes.router)
app.include_router(orders_routes.router)
app.include_router(payments_routes.router)


@app.on_event("startup")
async def on_startup():
    # create database tables if they don't exist
    db_session.create_db()
    app.state.pubsub = PubSub()
    if settings.PROMOTION_SWEEP_ENABLED:
        app.state.cron_tasks.append(start_daily_job(run_promotion_sweep, "promotion sweep"))


@app.on_event("shutdown")
async def on_shutdown():
    for task in app.state.cron_tasks:
        task.cancel()
    app.state.cron_tasks.clear()
    # ends every open order stream
    app.state.pubsub.close()


@app.get("/")
def root():
    return {"status": "ok", "listeners": app.state.pubsub.get_status()}

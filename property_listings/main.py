from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from structlog import get_logger
from property_listings.config import settings
from property_listings.log_config import configure_logging
from property_listings.routers import listings
from property_listings.routers import upload
from property_listings.services.health import get_health
import json

configure_logging()
logger = get_logger()

app = FastAPI(title="Property Listings Service")
app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ORIGINS, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

scheduler = AsyncIOScheduler()
redis_client: Redis | None = None

HEALTH_CACHE_KEY = "cached_health_status"

async def update_health_cache():
    global redis_client
    if redis_client is None:
        redis_client = Redis.from_url(settings.REDIS_URL)
    health_status = await get_health()
    await redis_client.setex(HEALTH_CACHE_KEY, settings.HEALTH_CACHE_SECONDS, json.dumps(health_status))

@app.on_event("startup")
async def startup_event():
    global redis_client
    redis_client = Redis.from_url(settings.REDIS_URL)
    await FastAPILimiter.init(redis_client)
    # Run once immediately on startup
    await update_health_cache()
    scheduler.add_job(update_health_cache, "interval", seconds=settings.HEALTH_CACHE_SECONDS)
    scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    scheduler.shutdown()
    if redis_client:
        await redis_client.close()

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"detail": "Invalid request body", "errors": jsonable_errors(exc)})

def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]

app.include_router(listings.router)
app.include_router(upload.router)

@app.get("/health")
async def root_health():
    return "ok"

@app.get("/status")
async def upstream_status():
    """Cached upstream health; probes live when nothing is cached yet."""
    if redis_client is not None:
        cached = await redis_client.get(HEALTH_CACHE_KEY)
        if cached:
            return json.loads(cached)
    return await get_health()

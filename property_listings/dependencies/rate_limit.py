from fastapi_limiter.depends import RateLimiter

from property_listings.config import settings

# Shared instances so tests can switch them off via app.dependency_overrides
write_limiter = RateLimiter(times=settings.WRITE_RATE_LIMIT, seconds=60)
upload_limiter = RateLimiter(times=settings.UPLOAD_RATE_LIMIT, seconds=60)

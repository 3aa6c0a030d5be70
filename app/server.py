import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from app.api.routers import incentives_router
from app.core.config import get_settings
from app.services.incentives.errors import IncentiveError

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(IncentiveError)
async def incentive_error_handler(request: Request, exc: IncentiveError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

# Include routers
app.include_router(incentives_router.router, prefix=settings.API_PREFIX, tags=["incentives"])

@app.get(f"{settings.API_PREFIX}/health", tags=["Root"])
async def health():
    return {"status": "ok"}

# Optional: Add logic to run the server directly for development
if __name__ == "__main__":
    uvicorn.run("app.server:app", host="0.0.0.0", port=8000, reload=True)

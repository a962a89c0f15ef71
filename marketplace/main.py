# marketplace/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import db
from .errors import MarketplaceError
from .routers.admin import router as admin_router
from .routers.balances import router as balances_router
from .routers.contracts import router as contracts_router
from .routers.health import router as health_router
from .routers.jobs import router as jobs_router

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.init_models()
    yield
    await db.dispose()


app = FastAPI(title="Marketplace API", version="1.0.0", lifespan=lifespan)

# relaxed by default; set CORS_ORIGINS=https://a.example,https://b.example to tighten
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, **exc.extra})


@app.get("/")
def root(): return {"name": "marketplace-api"}

# routers
app.include_router(health_router)
app.include_router(contracts_router)
app.include_router(jobs_router)
app.include_router(balances_router)
app.include_router(admin_router)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "marketplace.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
    )

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.database import create_db_and_tables
from app.config import settings
from app.errors import MarketplaceError
from app.routes import (
    cart,
    checkout,
    health,
    listings,
    messages,
    orders,
    profiles,
)

from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="BookMyBook Marketplace API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


app.include_router(listings.router, prefix="/listings", tags=["Listings"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(messages.router, prefix="/messages", tags=["Messages"])
app.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
app.include_router(health.router, prefix="/health", tags=["Health"])

@app.get("/")
def root():
    return {
        "listing_endpoints": [
            "/listings", "/listings/{listing_id}", "/listings/mine"
        ],
        "cart": [
            "/cart", "/cart/add", "/cart/remove/{id}"
        ],
        "checkout": [
            "/checkout/session", "/checkout/complete"
        ],
        "orders": [
            "/orders", "/orders/sales", "/orders/stats"
        ],
        "messages": [
            "/messages", "/messages/{other_id}"
        ],
        "profiles": [
            "/profiles/me", "/profiles/{profile_id}"
        ],
    }

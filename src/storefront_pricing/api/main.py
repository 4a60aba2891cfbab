from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from storefront_pricing import __version__
from storefront_pricing.config.logging import setup_logging
from storefront_pricing.engine import PricingError
from storefront_pricing.engine.formatting import percent_label
from storefront_pricing.api.pricing_api import router as pricing_router
from storefront_pricing.api.state import engine, settings

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Storefront Pricing API",
    description="GST pricing for carts, orders and government quotations",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include pricing API
app.include_router(pricing_router)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Storefront Pricing API Active"}


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "version": __version__,
        "gst_rate": float(engine.gst_rate),
        "cgst_percent": percent_label(engine.split_rate),
        "sgst_percent": percent_label(engine.split_rate),
        "currency": settings.currency_symbol,
    }

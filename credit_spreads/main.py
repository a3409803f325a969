# credit_spreads/main.py
import logging

from fastapi import FastAPI
from credit_spreads.routers import credit_spreads
from credit_spreads.core.config import settings
from dotenv import load_dotenv

load_dotenv()

logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    title="Credit Spread Analysis API",
    version="1.0.0",
    description="API for building bear call and bull put credit spreads from an option chain snapshot."
)

# Include routers
app.include_router(credit_spreads.router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("credit_spreads.main:app", host=settings.api_host, port=settings.api_port, reload=True)

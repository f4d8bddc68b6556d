#run it with uvicorn insight_backend.main:app --reload
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging
import uvicorn

# Load environment variables from .env file
load_dotenv()

from insight_backend.api.api_router import api_router
from insight_backend.core.config import get_settings
from insight_backend.core.contact_service import ContactRequestError
from insight_backend.core.mailer import get_email_sender
from insight_backend.models.contact import ContactResponse

settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve the email sender once at startup"""
    sender = get_email_sender()
    if sender.is_configured():
        logger.info(f"✅ Mailgun sender ready for domain {sender.domain}")
    logger.info(f"🚀 Insight RTLS backend running on port {settings.port}")
    yield
    logger.info("Insight RTLS backend shutting down")


app = FastAPI(title="Insight RTLS Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContactRequestError)
async def contact_request_error_handler(request: Request, exc: ContactRequestError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ContactResponse(success=False, message=exc.message).model_dump(),
    )


app.include_router(api_router)


def run():
    """Console entrypoint: serve the app on the configured PORT"""
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

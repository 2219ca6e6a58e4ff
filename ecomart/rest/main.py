import logging.config
import yaml
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from ecomart.rest.routers import chat

LOGGING_CONFIG = os.path.join(os.path.dirname(__file__), "logging_config.yaml")
DEFAULT_CORS_ORIGINS = "http://localhost,http://localhost:5000,http://localhost:3000"


def setup_logging(log_file=None):
    """Configure logging from the bundled YAML; ECOMART_LOG_FILE adds a rotating file handler."""
    with open(LOGGING_CONFIG, 'r') as f:
        config = yaml.safe_load(f)
    log_file = log_file or os.getenv("ECOMART_LOG_FILE")
    if log_file:
        config['handlers']['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'default',
            'level': 'DEBUG',
            'filename': log_file,
            'maxBytes': 10485760,
            'backupCount': 5,
            'encoding': 'utf8',
        }
        config['loggers']['ecomart']['handlers'].append('file')
    logging.config.dictConfig(config)


def cors_origins():
    origins_str = os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


setup_logging()
LOGGER = logging.getLogger(__name__)

app = FastAPI(
    title="EcoMart Chatbot API",
    description="Chat with the EcoMart assistant, including shipping price quotes",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(chat.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

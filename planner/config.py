from pathlib import Path
import logging
import os

from dotenv import load_dotenv

# Load environment variables from repo root and planner/.env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")

# An empty DATABASE_URL runs the service without a store (degraded mode).
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./planner.db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30)))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "token")

# Identity that is given the admin role on upsert.
OWNER_OPEN_ID = os.getenv("OWNER_OPEN_ID", "")

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
MAX_AUDIO_BYTES = int(os.getenv("MAX_AUDIO_BYTES", str(16 * 1024 * 1024)))
AUDIO_DOWNLOAD_TIMEOUT = float(os.getenv("AUDIO_DOWNLOAD_TIMEOUT", "30"))

LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

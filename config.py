# config.py
"""
Environment configuration for the RentFlow backend.

All settings are read once at import time, after loading a local .env file.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _build_database_url() -> str:
     """
     Resolve the SQLAlchemy URL.

     DATABASE_URL wins when set; otherwise the MS SQL Server URL is assembled
     from the individual DB_* variables.
     """
     url = os.getenv("DATABASE_URL")
     if url:
          return url

     safe_user = quote_plus(os.getenv("DB_USER") or "")
     safe_pass = quote_plus(os.getenv("DB_PASS") or "")
     server = os.getenv("DB_SERVER", "localhost")
     port = os.getenv("DB_PORT", "1433")
     name = os.getenv("DB_NAME", "rentflow")
     return f"mssql+pymssql://{safe_user}:{safe_pass}@{server}:{port}/{name}"


# Database
DATABASE_URL = _build_database_url()
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Identity provider tokens
JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None

# Object storage
AZURE_STORAGE_ACCOUNT = os.getenv("AZURE_STORAGE_ACCOUNT")
AZURE_STORAGE_KEY = os.getenv("AZURE_STORAGE_KEY")
AZURE_STORAGE_CONNECTION_STRING = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
ATTACHMENTS_CONTAINER = os.getenv("ATTACHMENTS_CONTAINER", "charge-attachments")
ATTACHMENT_URL_TTL_SECONDS = int(os.getenv("ATTACHMENT_URL_TTL_SECONDS", "3600"))

# Invitations
PUBLIC_APP_URL = os.getenv("PUBLIC_APP_URL", "http://localhost:4321").rstrip("/")

# HTTP
CORS_ORIGINS = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "10000"))

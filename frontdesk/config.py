import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./frontdesk.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Public base URL of the app, used for email links and OAuth redirect defaults
APP_URL = os.getenv("APP_URL", "http://localhost:3000")
FRONTEND_URL = os.getenv("FRONTEND_URL", APP_URL)

# Clerk (identity provider) Configuration
# Session tokens are RS256 JWTs signed with the instance JWKS
CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
CLERK_API_URL = os.getenv("CLERK_API_URL", "https://api.clerk.com/v1")
CLERK_JWKS_URL = os.getenv("CLERK_JWKS_URL", f"{CLERK_API_URL}/jwks")
CLERK_ISSUER = os.getenv("CLERK_ISSUER")
CLERK_SESSION_COOKIE = os.getenv("CLERK_SESSION_COOKIE", "__session")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Front Desk <noreply@frontdesk.app>")

# Google Calendar OAuth Configuration
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", f"{APP_URL}/api/calendar/google/callback")

# Microsoft Outlook OAuth Configuration
OUTLOOK_CLIENT_ID = os.getenv("OUTLOOK_CLIENT_ID")
OUTLOOK_CLIENT_SECRET = os.getenv("OUTLOOK_CLIENT_SECRET")
OUTLOOK_REDIRECT_URI = os.getenv("OUTLOOK_REDIRECT_URI", f"{APP_URL}/api/calendar/outlook/callback")

# Cloudflare R2 Configuration (visitor photos)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "frontdesk")
# Public bucket domain (r2.dev or custom) used to build returned photo URLs
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL", "")

# CORS: comma-separated list of allowed origins
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", APP_URL).split(",") if o.strip()]

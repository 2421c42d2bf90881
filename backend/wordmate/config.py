# wordmate/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "WordMate API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # Access tokens (PyJWT, HS256)
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # CORS origins for frontend (web + Capacitor shells)
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "capacitor://localhost",
        "https://localhost",
    ]

    # Shared secret for the manual payment desk (confirm / list orders)
    # Empty means every admin call is rejected
    admin_secret_key: str = os.getenv("ADMIN_SECRET_KEY", "")

    # Resend transactional email; no key = development mode (mails are only logged)
    resend_api_key: str | None = os.getenv("RESEND_API_KEY") or None
    resend_from_email: str = os.getenv("RESEND_FROM_EMAIL", "onboarding@resend.dev")

    # Order / code storage: "db" (Tortoise tables) or "file" (orders.json + codes.json)
    code_store_backend: str = os.getenv("CODE_STORE_BACKEND", "db").lower()
    data_dir: str = os.getenv("DATA_DIR", "data")

    # Pending orders older than this become "expired" when looked at; 0 disables
    order_expire_minutes: int = int(os.getenv("ORDER_EXPIRE_MINUTES", "0"))

    currency: str = os.getenv("CURRENCY", "CNY")

settings = Settings()  # Instantiate configuration

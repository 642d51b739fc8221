# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Whisper Chat API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5001"))

    # CORS origins for frontend (cookies require an explicit origin list)
    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"))

    # Session token settings
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    session_ttl_days: int = int(os.getenv("SESSION_TTL_DAYS", "7"))
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "jwt")

    # Create tables on startup (quick local setup; use Aerich migrations otherwise)
    db_generate_schemas: bool = os.getenv("DB_GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # Raw request body ceiling (base64 images travel inside JSON bodies)
    max_body_bytes: int = int(os.getenv("MAX_BODY_BYTES", str(50 * 1024 * 1024)))

    # Local blob store (used when Cloudinary is not configured)
    upload_dir: str = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5001")

    # Cloudinary blob store
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_folder: str = os.getenv("CLOUDINARY_FOLDER", "whisper-chat")
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_URL", "https://api.cloudinary.com/v1_1")
    blob_upload_timeout: float = float(os.getenv("BLOB_UPLOAD_TIMEOUT", "30"))

    @property
    def cookie_secure(self) -> bool:
        """Only send the session cookie over HTTPS outside local development."""
        return self.env != "dev"


settings = Settings()  # Instantiate configuration

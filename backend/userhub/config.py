# userhub/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "UserHub Accounts API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))

    # CORS origins for frontend (comma-separated in CORS_ORIGIN)
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGIN", "http://localhost:5173,http://localhost:3000").split(",")
        if origin.strip()
    ]

    # Token settings: access and refresh tokens are signed with independent secrets
    access_token_secret: str = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
    refresh_token_secret: str = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret")
    refresh_token_expire_minutes: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 10)))

    # Cookie settings (COOKIE_SECURE=false only for plain-http local development)
    cookie_secure: bool = _env_flag("COOKIE_SECURE", "true")
    cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax")

    # Cloudinary settings (remote media host for avatars and cover images)
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_folder: str | None = os.getenv("CLOUDINARY_FOLDER") or None
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")

    # Multipart uploads are spooled here before being pushed to the media host
    upload_tmp_dir: str = os.getenv("UPLOAD_TMP_DIR", "./public/temp")

settings = Settings()  # Instantiate configuration

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./jobportal.db"
    # Generate with: python -c "import secrets; print(secrets.token_hex(32))"
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 7 * 24 * 3600
    upload_dir: Path = Path("public/uploads")
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    frontend_urls: list[str] = ["http://localhost:5173"]
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 5555
    environment: str = "development"
    log_level: str = "INFO"
    allow_admin_registration: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = {"env_prefix": "JOBPORTAL_", "env_file": ".env", "frozen": True}

"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for LinkDeck happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). List fields are read as JSON arrays,
      e.g. CORS_ALLOWED_ORIGINS='["https://links.example.com"]'.

  @model_validator(mode="after"): cross-field validation after all fields are
      resolved. Implements the SECRET_KEY policy: dev mode generates a key with
      a warning, production mode refuses to start without one. There is no
      hard-coded fallback secret.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
auth/ or catalog/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("linkdeck.config")

DEFAULT_DATA_DIR = Path("data")
APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces the
    production-safety rules at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    secret_key: str = ""
    database_url: str = f"sqlite:///{DEFAULT_DATA_DIR / 'linkdeck.db'}"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # 24 hours. Tokens are bearer-only (no refresh), so the admin logs in
    # again once a day.
    token_expire_seconds: int = Field(default=86400, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # First-run seed. admin_password has no default; see Settings docstring
    # and auth.store.UserStore.ensure_admin().
    admin_username: str = "admin"
    admin_password: str = ""

    # ------------------------------------------------------------------
    # Listing policy
    # ------------------------------------------------------------------

    # GET /api/links is the public read-only view used by the home page.
    public_links: bool = True
    # Some deployments answer GET /api/admin/link-groups without an
    # Authorization header with [] instead of 401. Off unless asked for.
    admin_listing_empty_without_auth: bool = False

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # nosec B104 -- container default, override via HOST
    port: int = 8080
    cors_allowed_origins: list[str] = ["http://localhost:5173", "http://localhost:8080"]
    cors_allowed_methods: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allowed_headers: list[str] = ["Content-Type", "Authorization"]
    allowed_hosts: list[str] = ["*"]
    ui_dist_dir: str = ""

    # ------------------------------------------------------------------
    # Rate limiting / uploads
    # ------------------------------------------------------------------

    rate_limit_enabled: bool = True
    login_rate_limit: str = "10/minute"
    import_max_bytes: int = 10 * 1024 * 1024

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive restart -- acceptable for local dev.

        Production mode (DEBUG=false or not set): refuse to start if
            SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not persist across restarts.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()


def ensure_sqlite_dir(db_url: str) -> None:
    """Create the parent directory of a file-backed SQLite URL.

    In-memory URLs and non-SQLite URLs are left alone. An uncreatable
    directory raises OSError, which aborts startup.
    """
    prefix = "sqlite:///"
    if not db_url.startswith(prefix):
        return
    path = db_url[len(prefix) :]
    if not path or path == ":memory:" or path.startswith("file:"):
        return
    Path(path).parent.mkdir(parents=True, exist_ok=True)

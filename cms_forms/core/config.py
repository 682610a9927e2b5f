# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Project configuration
    PROJECT_NAME: str = "CMS Form Entries"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    # API docs toggle (from env ENABLE_API_DOCS, default True)
    ENABLE_API_DOCS: bool = True

    # Environment configuration
    ENVIRONMENT: str = "development"  # development or production

    # Database configuration
    DATABASE_URL: str = "sqlite:///./cms_forms.db"

    # Create missing tables on startup (only in development)
    DB_AUTO_CREATE: bool = True

    # JWT configuration
    SECRET_KEY: str = "secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60  # 7 days in minutes

    # CORS configuration (comma-separated list of origins)
    BACKEND_CORS_ORIGINS: str = "*"

    # Public site URL, used to build absolute links in notification emails
    CMS_SITE_URL: str = "http://localhost:8000"

    # Sender address of form notification emails
    MAIL_SENDER: str = "cms@example.com"

    # Layout template wrapping public form pages
    FORM_LAYOUT: str = "layouts/default.html"

    # Form entry listing page size
    ENTRIES_PER_PAGE: int = 15

    # Suppress the per-fixture trace line of the data loader
    DATA_LOADER_SILENT: bool = False

    # Seed data initialization configuration
    INIT_DATA_DIR: str = str(PACKAGE_DIR / "init_data")
    INIT_DATA_ENABLED: bool = True
    INIT_DATA_FORCE: bool = False  # Load seed files even if forms already exist

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global configuration instance
settings = Settings()

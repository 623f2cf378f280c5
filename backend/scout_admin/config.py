"""
scout_admin/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from the environment
(or a `.env` file) and initializes the Firebase Admin SDK (Auth + Firestore) from the
service-account credentials. Other modules import `settings` and call `get_db()` for the
Firestore client.
"""
import json
import logging
from functools import lru_cache

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("scout.config")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    # Firebase service account: inline JSON wins over the file path
    firebase_service_account: str = Field("", description="Inline service-account JSON")
    firebase_cred_file: str = Field("firebase-account.json", description="Service-account file path")
    firebase_project_id: str = ""
    firebase_web_api_key: str = Field("", description="Enables email/password login via Firebase REST")

    # Cloudflare Turnstile
    turnstile_secret_key: str = ""
    turnstile_site_key: str = ""

    # The Blue Alliance
    tba_api_key: str = ""

    debug: bool = False
    app_env: str = "development"
    allowed_origins: str = "*"  # Comma-separated list or '*' for all
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


# Load settings from environment (.env file, etc.)
settings = Settings()


def _load_credentials() -> credentials.Certificate:
    if settings.firebase_service_account:
        return credentials.Certificate(json.loads(settings.firebase_service_account))
    return credentials.Certificate(settings.firebase_cred_file)


def init_firebase() -> firebase_admin.App:
    """Initialize the default Firebase app once; later calls return the existing app."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id
    try:
        app = firebase_admin.initialize_app(_load_credentials(), options or None)
    except ValueError as e:
        if "already exists" in str(e):
            # Initialized concurrently by another request
            return firebase_admin.get_app()
        raise
    logger.info("Firebase app initialized (project=%s)", app.project_id)
    return app


@lru_cache
def get_db():
    """Shared Firestore client for the default Firebase app."""
    return firestore.client(app=init_firebase())

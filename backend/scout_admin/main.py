"""
# `scout_admin/main.py` — Application entry point

Builds the FastAPI app: logging, CORS, error handlers and routers.

## Routers
- `/api/auth`                       — login / me / logout / captcha
- `/api/teams`                      — teams (master manages, teams read their own)
- `/api/teams/{teamId}/members`     — team members (Firebase Auth accounts)
- `/api/matches/{teamId}`           — team events
- `/api/tba/events`                 — The Blue Alliance event lookup (public)

Firebase Admin is initialized on startup (and lazily on first Firestore use).
"""
import logging

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from scout_admin.config import init_firebase, settings
from scout_admin.core.errors import (
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from scout_admin.routers import auth, matches, members, tba, teams

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="FRC Scouting Admin API",
        description="Teams, team members and season events for FRC scouting teams.",
        version="1.0.0",
        redirect_slashes=False,
    )

    # Configure CORS (comma-separated origins or '*')
    allow_origins = [o.strip() for o in settings.allowed_origins.split(",")] if settings.allowed_origins else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth.router)
    app.include_router(teams.router)
    app.include_router(members.router)
    app.include_router(matches.router)
    app.include_router(tba.router)

    @app.on_event("startup")
    def _startup_firebase():
        init_firebase()

    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("scout_admin.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

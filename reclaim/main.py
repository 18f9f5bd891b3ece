import os
import uuid
from time import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from reclaim.routers import admin, auth, claims, items, media, profile
from reclaim.services.identity import (
    FirebaseIdentityProvider,
    FirestoreProfileStore,
    IdentityProvider,
    ProfileStore,
)
from reclaim.services.store import LifecycleStore
from reclaim.utils.logging_config import get_logger, set_request_id, setup_logging

load_dotenv()

setup_logging(json_fmt=os.getenv("LOG_JSON", "false").lower() == "true")
logger = get_logger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def create_app(
    store: LifecycleStore | None = None,
    identity: IdentityProvider | None = None,
    profiles: ProfileStore | None = None,
) -> FastAPI:
    app = FastAPI(title="Reclaim Lost & Found API")

    profiles = profiles or FirestoreProfileStore()

    app.state.store = store or LifecycleStore.from_env()
    app.state.profiles = profiles
    app.state.identity = identity or FirebaseIdentityProvider(profiles)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        set_request_id(rid)

        start = time()
        logger.info("REQ start %s %s", request.method, request.url.path)

        response = await call_next(request)

        duration = (time() - start) * 1000
        logger.info(
            "REQ end %s %s status=%s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        response.headers["X-Request-ID"] = rid
        return response

    # Register routers
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(profile.router, prefix="/profile", tags=["Profile"])
    app.include_router(items.router, prefix="/items", tags=["Items"])
    app.include_router(claims.router, prefix="/claims", tags=["Claims"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])
    app.include_router(media.router, prefix="/media", tags=["Media"])

    @app.get("/")
    def root():
        return {"status": "ok"}

    return app


app = create_app()

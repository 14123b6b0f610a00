import logging

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from socialite.api.routes import router
from socialite.core.config import settings
from socialite.core.logging import configure_logging
from socialite.http.middleware import SocialiteMiddleware

configure_logging()

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=settings.APP_DESCRIPTION,
    )

    # Last added runs first: the session must exist before SocialiteMiddleware binds it
    app.add_middleware(SocialiteMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        same_site="lax",
    )

    app.include_router(router, prefix=settings.AUTH_PREFIX)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    logger.info(f"{settings.APP_NAME} ready with drivers: {', '.join(sorted(settings.PROVIDERS))}")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "socialite.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from socialite.api.deps import get_request_snapshot, get_session_store
from socialite.api.schemas import DriverListResponse, SocialUserResponse
from socialite.contracts import Provider
from socialite.core.config import settings
from socialite.core.exceptions import (
    SocialiteException,
    UnsupportedDriverError,
    convert_to_http_exception,
)
from socialite.http.request import ServerRequest
from socialite.http.session import SessionInterface
from socialite.manager import SocialiteManager

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_provider(
    driver: str, request: ServerRequest, session: SessionInterface
) -> Provider:
    """
    Build the provider for a URL driver name.

    Only registered short names are reachable from the URL; class paths are
    never resolved from user input.
    """
    if driver not in SocialiteManager.drivers:
        raise UnsupportedDriverError(driver)

    manager = SocialiteManager(settings.provider_config(driver))
    return manager.driver(driver, request=request, session=session)


@router.get("/drivers", response_model=DriverListResponse)
async def list_drivers() -> DriverListResponse:
    return DriverListResponse(
        drivers=list(SocialiteManager.drivers),
        configured=sorted(name for name in settings.PROVIDERS if name in SocialiteManager.drivers),
    )


@router.get("/{driver}/redirect")
async def redirect_to_provider(
    driver: str,
    request: ServerRequest = Depends(get_request_snapshot),
    session: SessionInterface = Depends(get_session_store),
) -> RedirectResponse:
    """
    Redirect the user to the provider's consent/login page.

    Usage:
        Frontend opens: GET /auth/github/redirect
        Browser is redirected to GitHub's authorization page.
    """
    try:
        provider = _get_provider(driver, request, session)
        response = await provider.redirect()
        logger.info(f"[{driver}] Initiating social login")
        return response

    except SocialiteException as e:
        logger.warning(f"[{driver}] Could not initiate login: {e}")
        raise convert_to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"[{driver}] Failed to initiate login: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to initiate social login.",
        ) from e


@router.api_route(
    "/{driver}/callback", methods=["GET", "POST"], response_model=SocialUserResponse
)
async def handle_provider_callback(
    driver: str,
    request: ServerRequest = Depends(get_request_snapshot),
    session: SessionInterface = Depends(get_session_store),
) -> SocialUserResponse:
    """
    Handle the callback from the provider.

    Apple posts the callback as a form (response_mode=form_post); every other
    driver uses GET query parameters.
    """
    try:
        provider = _get_provider(driver, request, session)
        user = await provider.user()

        logger.info(f"[{driver}] User {user.id} authenticated")
        return SocialUserResponse(
            provider=driver,
            approved_scopes=user.approved_scopes,
            **user.public_profile(),
        )

    except SocialiteException as e:
        logger.warning(f"[{driver}] Authentication failed: {e}")
        raise convert_to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"[{driver}] Callback error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Social authentication failed. Please try again.",
        ) from e

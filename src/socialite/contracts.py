# contracts.py

from abc import ABC, abstractmethod

from starlette.responses import RedirectResponse

from socialite.user import User


class Provider(ABC):
    """
    Capability shared by every social login driver.

    Flow:
        1. redirect()  — send the user to the provider's authorization page
        2. user()      — resolve the authenticated user from the callback request
    """

    @abstractmethod
    async def redirect(self) -> RedirectResponse:
        """Build the redirect to the provider's authorization page."""
        pass

    @abstractmethod
    async def user(self) -> User:
        """Resolve the authenticated user from the current callback request."""
        pass

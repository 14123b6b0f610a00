"""
SocialiteManager — resolves a driver name to a ready-to-use provider.

Resolution order for ``driver(name)``:
    1. Built-in short names (``twitter`` goes through its own creator because
       OAuth1 providers need a signing server, the rest are OAuth2 providers
       constructed directly)
    2. Names registered with ``extend()``
    3. A provider class, or a dotted path to one; it is only accepted when the
       constructed instance is an OAuth2 provider
    4. Anything else raises UnsupportedDriverError
"""

import importlib
import inspect
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from socialite import one, two
from socialite.contracts import Provider
from socialite.core.exceptions import InvalidConfigurationError, UnsupportedDriverError
from socialite.http.request import ServerRequest
from socialite.http.session import Session, SessionInterface, get_current_session

logger = logging.getLogger(__name__)

DriverCreator = Callable[[ServerRequest, Mapping[str, Any], SessionInterface], Provider]

REQUIRED_CONFIG_KEYS = ("client_id", "redirect", "client_secret")


class SocialiteManager:
    drivers: Mapping[str, type[Provider]] = MappingProxyType(
        {
            "twitter": one.TwitterProvider,
            "github": two.GithubProvider,
            "google": two.GoogleProvider,
            "facebook": two.FacebookProvider,
            "bitbucket": two.BitbucketProvider,
            "linkedin": two.LinkedInProvider,
            "apple": two.AppleProvider,
        }
    )

    # Built-in names that need more than the default (request, config, session) constructor
    _special_creators: Mapping[str, str] = MappingProxyType({"twitter": "_create_twitter_driver"})

    def __init__(
        self,
        config: Mapping[str, Any],
        request: ServerRequest | None = None,
        session: SessionInterface | None = None,
    ):
        if any(config.get(key) is None for key in REQUIRED_CONFIG_KEYS):
            raise InvalidConfigurationError()

        self._config: Mapping[str, Any] = MappingProxyType(dict(config))
        self._request = request
        self._session = session
        self._custom_creators: dict[str, DriverCreator] = {}

    @property
    def config(self) -> Mapping[str, Any]:
        return self._config

    def extend(self, driver: str, creator: DriverCreator) -> "SocialiteManager":
        """
        Register a custom driver.

        ``creator`` is called with (request, config, session) and must return
        a provider. Built-in names cannot be replaced.
        """
        if driver in self.drivers:
            raise ValueError(f"Driver [{driver}] is built in and cannot be replaced")

        self._custom_creators[driver] = creator
        logger.info(f"Registered custom social driver: {driver}")
        return self

    def get_drivers(self) -> list[str]:
        return [*self.drivers, *self._custom_creators]

    def driver(
        self,
        driver: str | type,
        *,
        request: ServerRequest | None = None,
        session: SessionInterface | None = None,
    ) -> Provider:
        """
        Get a driver instance.

        Args:
            driver:  Short driver name, custom driver name, provider class or
                     dotted path to a provider class
            request: Request snapshot for this call (defaults to get_request())
            session: Session store for this call (defaults to get_session())

        Returns:
            Provider instance

        Raises:
            UnsupportedDriverError: If the driver cannot be resolved
        """
        if isinstance(driver, str) and driver in self.drivers:
            creator_name = self._special_creators.get(driver)
            if creator_name is not None:
                return getattr(self, creator_name)(request, session)

            return self.drivers[driver](
                self._request_for(request),
                self._config,
                self._session_for(session),
            )

        if isinstance(driver, str) and driver in self._custom_creators:
            return self._custom_creators[driver](
                self._request_for(request),
                self._config,
                self._session_for(session),
            )

        provider_class = self._load_provider_class(driver)
        if provider_class is not None:
            instance = provider_class(
                self._request_for(request),
                self._config,
                self._session_for(session),
            )

            if isinstance(instance, two.AbstractProvider):
                return instance

            logger.warning(f"{provider_class.__qualname__} is not an OAuth2 provider")

        name = driver if isinstance(driver, str) else driver.__qualname__
        raise UnsupportedDriverError(name)

    def _create_twitter_driver(
        self,
        request: ServerRequest | None = None,
        session: SessionInterface | None = None,
    ) -> one.TwitterProvider:
        return one.TwitterProvider(
            self._request_for(request),
            one.TwitterServer(self.format_config()),
            self._session_for(session),
        )

    def get_request(self) -> ServerRequest:
        if self._request is not None:
            return self._request
        return ServerRequest.from_globals()

    def get_session(self) -> SessionInterface:
        if self._session is not None:
            return self._session

        ambient = get_current_session()
        if ambient is not None:
            return ambient
        return Session()

    def _request_for(self, request: ServerRequest | None) -> ServerRequest:
        return request if request is not None else self.get_request()

    def _session_for(self, session: SessionInterface | None) -> SessionInterface:
        return session if session is not None else self.get_session()

    def format_config(self) -> dict[str, Any]:
        """OAuth1 view of the configuration; explicit keys in the config win."""
        return {
            "identifier": self._config["client_id"],
            "secret": self._config["client_secret"],
            "callback_uri": self._config["redirect"],
            **self._config,
        }

    @staticmethod
    def _load_provider_class(driver: str | type) -> type | None:
        if inspect.isclass(driver):
            provider_class: Any = driver
        else:
            module_path, _, attr = driver.rpartition(":" if ":" in driver else ".")
            if not module_path or not attr or module_path.startswith("."):
                return None

            try:
                module = importlib.import_module(module_path)
                provider_class = getattr(module, attr)
            except (ImportError, AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Could not load driver class {driver}: {e}")
                return None

        if not inspect.isclass(provider_class) or inspect.isabstract(provider_class):
            return None
        return provider_class

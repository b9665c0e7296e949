import logging
from typing import Optional

from httpx import USE_CLIENT_DEFAULT, Client, Request, Response, TransportError

from .constants import PKG_NAME
from .errors import ConfigNotFoundError, ConnectionError
from .models import AppContext, AuthConfig
from .util import load_auth_config, load_auth_config_from_env

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ApiClient(Client):

    """Makes authenticated requests on behalf of the selected scope"""

    _config: AuthConfig

    def __init__(self, config: AuthConfig, **kwargs):

        headers = {
            "Authorization": f"Bearer {config.token}",
            "User-Agent": PKG_NAME,
        }

        kwargs.setdefault("timeout", DEFAULT_TIMEOUT)
        super().__init__(base_url=config.url, headers=headers, **kwargs)
        self._config = config

    @classmethod
    def from_context(cls, app_ctx: AppContext):

        #
        # Stored config has priority over environment.
        # Values passed with global options override both
        #

        try:
            config = load_auth_config()
        except ConfigNotFoundError:
            config = load_auth_config_from_env(app_ctx.token)

        overrides = {
            "token": app_ctx.token,
            "scope": app_ctx.scope,
            "url": app_ctx.api_url,
        }

        updates = {k: v for k, v in overrides.items() if v}
        return cls(config.model_copy(update=updates))

    @property
    def scope(self) -> Optional[str]:
        return self._config.scope

    def send(
        self,
        request: Request,
        *,
        stream=False,
        auth=USE_CLIENT_DEFAULT,
        follow_redirects=USE_CLIENT_DEFAULT,
    ) -> Response:

        logger.debug("%s %s", request.method, request.url)

        try:
            res = super().send(
                request=request,
                stream=stream,
                follow_redirects=follow_redirects,
                auth=auth,
            )
        except TransportError as e:
            logger.debug("Transport error: %r", e)
            raise ConnectionError(str(request.url)) from e

        logger.debug("%s %s -> %d", request.method, request.url, res.status_code)
        return res

"""Discovery of the public tunnel URL through the ngrok status API."""

import httpx
from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..common.exceptions import (
    DiscoveryEmptyError,
    DiscoveryMalformedError,
    DiscoveryUnreachableError,
    InvalidPublicUrlError,
    NotRunningError,
)
from ..common.logging import get_logger
from ..config import DEFAULT_API_URL
from .models import ApiTunnels, TunnelInfo
from .process import NgrokProcess

logger = get_logger(__name__)

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class TunnelDiscoveryClient:
    """Asks the local ngrok API for the public URL of the running tunnel."""

    def __init__(
        self,
        ngrok: NgrokProcess,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 1.0,
    ):
        """Initialize discovery client.

        Args:
            ngrok: Supervisor that must report a running tunnel
            api_url: ngrok status API endpoint
            timeout: Request timeout in seconds
        """
        self.ngrok = ngrok
        self.api_url = api_url
        self.timeout = timeout

    async def fetch_public_url(self) -> TunnelInfo:
        """Fetch the public URL of the first ngrok tunnel.

        Only a single request is made; pacing and retries belong to the caller.

        Returns:
            Public endpoint of the tunnel

        Raises:
            NotRunningError: If ngrok was not started
            DiscoveryUnreachableError: If the status API cannot be reached
            DiscoveryMalformedError: If the response does not list tunnels
            DiscoveryEmptyError: If no tunnel is established yet
            InvalidPublicUrlError: If the tunnel URL cannot be parsed
        """
        if not self.ngrok.is_run():
            raise NotRunningError("Ngrok was not started!")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.api_url, headers={"Content-Type": "application/json"}
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DiscoveryUnreachableError(
                f"Ngrok API answered with status {e.response.status_code}"
            ) from e
        except httpx.TransportError as e:
            raise DiscoveryUnreachableError(
                f"Can't connect to ngrok API: {e!r}"
            ) from e

        logger.debug("Ngrok response", body=response.text)

        try:
            api_tunnels = ApiTunnels.model_validate_json(response.content)
        except ValidationError as e:
            logger.error("Can't parse ngrok API response", error=str(e))
            raise DiscoveryMalformedError("Can't parse ngrok API response") from e

        if not api_tunnels.tunnels:
            raise DiscoveryEmptyError("Error: no tunnels were returned by Ngrok")

        public_url = api_tunnels.tunnels[0].public_url
        try:
            url = _url_adapter.validate_python(public_url)
        except ValidationError as e:
            raise InvalidPublicUrlError("Bad URL returned from API") from e

        if not url.host:
            raise InvalidPublicUrlError("Bad URL returned from API")

        info = TunnelInfo(public_url=public_url, host=url.host, port=url.port)
        logger.info("Tunnel discovered", public_url=info.public_url)
        return info

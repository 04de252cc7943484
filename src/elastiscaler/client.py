"""Spotinst REST API client."""

from typing import Optional, Dict, Any, List
import aiohttp
import logging

from .config import Config
from .credentials import Credentials
from .errors import SpotinstAPIError

logger = logging.getLogger(__name__)


class SpotinstClient:
    """
    Thin async client for the Spotinst Elastigroup API.

    Every request is a single attempt; callers own retry policy.
    """

    def __init__(self, credentials: Credentials, base_url: Optional[str] = None):
        self.credentials = credentials
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.credentials.token}",
                    "Content-Type": "application/json",
                }
            )
        return self.session

    def _params(self) -> Dict[str, str]:
        if self.credentials.account:
            return {"accountId": self.credentials.account}
        return {}

    async def _error_message(self, response) -> str:
        """Best-effort message for a failed request, JSON envelope or raw text."""
        try:
            data = await response.json(content_type=None)
        except ValueError:
            data = None

        if isinstance(data, dict):
            envelope = data.get("response")
            if isinstance(envelope, dict):
                errors = envelope.get("errors") or []
                message = "; ".join(
                    f"{e.get('code', '')}: {e.get('message', '')}"
                    for e in errors
                    if isinstance(e, dict)
                )
                if message:
                    return message
                status = envelope.get("status")
                if isinstance(status, dict) and status.get("message"):
                    return str(status["message"])

        text = (await response.text()).strip()
        return text[:200] or "request failed"

    async def _handle(self, response) -> List[Dict[str, Any]]:
        if response.status < 200 or response.status >= 300:
            raise SpotinstAPIError(response.status, await self._error_message(response))

        try:
            data = await response.json(content_type=None)
        except ValueError as e:
            raise SpotinstAPIError(response.status, "response body is not JSON") from e

        envelope = data.get("response") if isinstance(data, dict) else None
        if not isinstance(envelope, dict):
            raise SpotinstAPIError(response.status, "unexpected response body")

        return envelope.get("items") or []

    async def get(self, path: str) -> List[Dict[str, Any]]:
        """
        Issue a GET request.

        Args:
            path: API path, e.g. /aws/ec2/group/sig-123

        Returns:
            The ``response.items`` list of the Spotinst envelope
        """
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        self.logger.debug(f"GET {url}")

        async with session.get(url, params=self._params()) as response:
            return await self._handle(response)

    async def put(self, path: str, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Issue a PUT request with a JSON body.

        Args:
            path: API path
            body: Request document

        Returns:
            The ``response.items`` list of the Spotinst envelope
        """
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        self.logger.debug(f"PUT {url}")

        async with session.put(url, params=self._params(), json=body) as response:
            return await self._handle(response)

    async def close(self):
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()

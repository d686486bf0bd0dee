# requestbuilder/utils/api/api_client.py
# Created: 2026-10-19 09:40:02

from typing import Dict, Any, Optional, Mapping, Protocol
from dataclasses import dataclass, field
import asyncio
import json
import logging
import time

import aiohttp
import yarl
from multidict import CIMultiDict, CIMultiDictProxy

from ...core.config import Config
from ...core.exceptions import RequestBuilderError
from ...core.utils import merge_headers
from .request_builder import DEFAULT_ACCEPT_HEADER, HttpRequest, RequestBuilder

logger = logging.getLogger(__name__)

class APIError(RequestBuilderError):
    """Base exception for API-related errors"""
    pass

class RequestError(APIError):
    """Raised when the transport fails to deliver a request"""
    pass

class ResponseError(APIError):
    """Raised when a response is not successful"""

    def __init__(
        self,
        message: str,
        status: int,
        body: str = "",
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.status = status
        self.body = body
        self.url = url

class GenericRequestError(ResponseError):
    """Raised for an unsuccessful response that carries no problem details"""

    def __init__(self, status: int, body: str, url: Optional[str] = None):
        super().__init__(
            f"Request failed with status code {status}: {body}",
            status=status,
            body=body,
            url=url,
            details={"status": status, "body": body, "url": url}
        )

class ProblemDetailsError(ResponseError):
    """Raised for an unsuccessful response whose body is an RFC 7807 problem report"""

    def __init__(self, problem: Any, status: int, body: str = "", url: Optional[str] = None):
        self.problem = problem
        self.title = problem.title
        self.detail = problem.detail
        self.extensions = dict(problem.extensions)
        super().__init__(
            f"Request to {url} failed: {problem.title} ({problem.status}) {problem.detail or ''}".rstrip(),
            status=problem.status if problem.status is not None else status,
            body=body,
            url=url,
            details={
                "url": url,
                "title": problem.title,
                "detail": problem.detail,
                "status": problem.status,
                "extensions": self.extensions
            }
        )

class DeserializationError(APIError):
    """Raised when a response body cannot be read as the requested type"""

    def __init__(self, message: str, status: int, body: str):
        super().__init__(
            f"{message} (status {status}): {body}",
            details={"status": status, "body": body}
        )
        self.status = status
        self.body = body

@dataclass
class APIConfig:
    """Configuration for API client"""
    base_url: str = ""
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = "requestbuilder/1.0"
    default_accept: str = DEFAULT_ACCEPT_HEADER
    default_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> 'APIConfig':
        """Build client settings from the ``http`` section of a Config"""
        return cls(
            base_url=config.get("http.base_url", "") or "",
            timeout=float(config.get("http.timeout", 30.0)),
            verify_ssl=bool(config.get("http.verify_ssl", True)),
            user_agent=config.get("http.user_agent", cls.user_agent),
            default_accept=config.get("http.default_accept") or DEFAULT_ACCEPT_HEADER,
            default_headers=dict(config.get("http.default_headers", {}) or {})
        )

@dataclass
class APIResponse:
    """Container for API response data"""
    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=lambda: CIMultiDictProxy(CIMultiDict()))
    url: str = ""
    reason: Optional[str] = None
    request: Optional[HttpRequest] = None
    elapsed: float = 0.0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

class Transport(Protocol):
    """Anything that can deliver an HttpRequest"""
    async def send(self, request: HttpRequest) -> APIResponse:
        ...

class APIClient:
    """
    Delivers built requests over aiohttp.

    The client is only a transport: it never inspects status codes (see
    ``response_handler`` for that), never retries and never caches. A
    session passed in by the caller is used as is and left open; otherwise
    the client creates one lazily and closes it in :meth:`close`.
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.config = config or APIConfig()
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config: Config, session: Optional[aiohttp.ClientSession] = None) -> 'APIClient':
        return cls(APIConfig.from_config(config), session=session)

    def request_builder(self) -> RequestBuilder:
        """New builder whose default Accept header comes from the client config"""
        return RequestBuilder(default_accept=self.config.default_accept)

    async def __aenter__(self) -> 'APIClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent}
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if the client created it"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def resolve_url(self, request: HttpRequest) -> yarl.URL:
        """Join the configured base URL and the request's relative URL"""
        relative = yarl.URL(request.url, encoded=True)
        if not self.config.base_url:
            return relative
        base = yarl.URL(self.config.base_url)
        if not base.path.endswith("/"):
            base = base.with_path(base.path + "/")
        return base.join(yarl.URL(request.url.lstrip("/"), encoded=True))

    async def send(self, request: HttpRequest) -> APIResponse:
        """
        Send a request and read the whole body.

        Args:
            request: descriptor produced by ``RequestBuilder.build()``

        Returns:
            APIResponse for any HTTP status

        Raises:
            RequestError: if the request could not be delivered
        """
        url = self.resolve_url(request)
        headers = CIMultiDict(merge_headers(self.config.default_headers))
        for name in set(request.headers.keys()):
            headers.popall(name, None)
        headers.extend(request.headers)
        session = await self._get_session()
        extra = {"method": request.method.value, "url": str(url)}

        start_time = time.monotonic()
        try:
            async with session.request(
                request.method.value,
                url,
                headers=headers,
                data=request.body,
                ssl=self.config.verify_ssl
            ) as response:
                body = await response.read()
                duration = time.monotonic() - start_time
                logger.info(f"Received {response.status} in {duration:.3f}s", extra=extra)
                return APIResponse(
                    status=response.status,
                    body=body,
                    headers=CIMultiDictProxy(CIMultiDict(response.headers)),
                    url=str(response.url),
                    reason=response.reason,
                    request=request,
                    elapsed=duration
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"API request failed: {str(e)}", extra=extra)
            raise RequestError(
                f"Request to {url} failed: {str(e) or type(e).__name__}",
                details={"method": request.method.value, "url": str(url)}
            ) from e

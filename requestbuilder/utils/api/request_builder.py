# requestbuilder/utils/api/request_builder.py
# Created: 2026-10-19 09:12:40

from typing import Dict, Any, Optional, List, Iterable, Mapping, Union
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from urllib.parse import quote
import json
import logging

from multidict import CIMultiDict, CIMultiDictProxy

from ...core.exceptions import InvalidArgumentError, SerializationError
from ...core.utils import stringify, to_jsonable

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT_HEADER = "application/json"
JSON_CONTENT_TYPE = "application/json"
TICKET_HEADER = "ticketheader"
QUERY_SAFE_CHARS = ","

class RequestMethod(Enum):
    """HTTP request methods"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

@dataclass(frozen=True)
class HttpRequest:
    """Immutable description of an outbound request"""
    method: RequestMethod
    url: str
    path: str
    query: Mapping[str, str]
    headers: CIMultiDictProxy
    body: Optional[bytes] = None
    content_type: Optional[str] = None

    @property
    def accept(self) -> List[str]:
        """Accept header values in the order they were added"""
        return self.headers.getall("Accept", [])

    def json(self) -> Any:
        """Decode the JSON body, or None when there is no body"""
        if self.body is None:
            return None
        return json.loads(self.body)

class RequestBuilder:
    """
    Fluent builder for :class:`HttpRequest` descriptors.

    Every mutator returns the builder itself, so a request reads as one
    chain::

        request = (
            RequestBuilder()
            .with_method(RequestMethod.POST)
            .with_request_uri("/api/orders")
            .add_query_parameter("ids", 42, 84)
            .with_json_content(order)
            .build()
        )

    A builder instance belongs to one caller; it is not meant to be shared
    between tasks.
    """

    def __init__(self, default_accept: str = DEFAULT_ACCEPT_HEADER):
        self._method = RequestMethod.GET
        self._path = ""
        self._query: Dict[str, str] = {}
        self._headers: CIMultiDict = CIMultiDict()
        self._accept: List[str] = []
        self._body: Optional[bytes] = None
        self._content_type: Optional[str] = None
        self._default_accept = default_accept

    def with_method(self, method: Union[RequestMethod, str]) -> "RequestBuilder":
        """Set the HTTP method; GET unless told otherwise"""
        if isinstance(method, str):
            try:
                method = RequestMethod(method.upper())
            except ValueError as e:
                raise InvalidArgumentError(
                    f"Unsupported HTTP method: {method}",
                    details={"method": method}
                ) from e
        self._method = method
        return self

    def with_request_uri(self, path: str) -> "RequestBuilder":
        """Set the relative path the request targets"""
        self._path = path
        return self

    with_path = with_request_uri

    def add_query_parameter(self, name: str, *values: Any) -> "RequestBuilder":
        """
        Add a query parameter.

        Several values are joined with commas under the single key
        (``ids=42,84``), not sent as repeated ``ids=`` pairs. Setting the
        same name again replaces the earlier value.

        Raises:
            InvalidArgumentError: if no value is given or a value has no
                string form
        """
        if not values:
            raise InvalidArgumentError(
                f"At least one value is required for query parameter {name}",
                details={"parameter": name}
            )
        if len(values) == 1:
            self._query[name] = stringify(values[0], "value")
        else:
            self._query[name] = ",".join(stringify(v, "values") for v in values)
        return self

    def add_query_parameters(self, name: str, values: Iterable[Any]) -> "RequestBuilder":
        """Add a multi-valued query parameter from an iterable"""
        values = list(values)
        if not values:
            raise InvalidArgumentError(
                f"At least one value is required for query parameter {name}",
                details={"parameter": name}
            )
        self._query[name] = ",".join(stringify(v, "values") for v in values)
        return self

    def add_header(self, name: str, value: str) -> "RequestBuilder":
        """Add a header; repeating a name keeps both values"""
        if name.lower() == "accept":
            return self.with_accept_header(value)
        self._headers.add(name, stringify(value, "value"))
        return self

    def with_accept_header(self, media_type: str) -> "RequestBuilder":
        self._accept.append(stringify(media_type, "media_type"))
        return self

    def with_ticket_header(self, ticket: str) -> "RequestBuilder":
        return self.add_header(TICKET_HEADER, ticket)

    def with_json_content(self, content: Any, content_type: str = JSON_CONTENT_TYPE) -> "RequestBuilder":
        """
        Serialize ``content`` to UTF-8 JSON and use it as the request body.

        Dataclasses, mappings, sequences, enums, dates and objects exposing
        ``to_dict()`` are supported.
        """
        try:
            payload = json.dumps(to_jsonable(content))
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Failed to serialize request content: {str(e)}",
                details={"type": type(content).__name__}
            ) from e
        self._body = payload.encode("utf-8")
        self._content_type = content_type
        return self

    def _build_query_string(self) -> str:
        # commas stay literal so multi-value parameters read ids=42,84
        return "&".join(
            f"{quote(name, safe=QUERY_SAFE_CHARS)}={quote(value, safe=QUERY_SAFE_CHARS)}"
            for name, value in self._query.items()
        )

    def build(self) -> HttpRequest:
        """Assemble the immutable request; the builder itself is left untouched"""
        url = self._path
        query_string = self._build_query_string()
        if query_string:
            url = f"{url}?{query_string}"

        headers = CIMultiDict(self._headers)
        for media_type in self._accept or [self._default_accept]:
            headers.add("Accept", media_type)
        if self._content_type:
            headers["Content-Type"] = f"{self._content_type}; charset=utf-8"

        logger.debug(f"Built {self._method.value} request for {url}")
        return HttpRequest(
            method=self._method,
            url=url,
            path=self._path,
            query=MappingProxyType(dict(self._query)),
            headers=CIMultiDictProxy(headers),
            body=self._body,
            content_type=self._content_type
        )

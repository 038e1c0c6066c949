"""HTTP client for operations projected from an OpenAPI document.

The client only assembles requests and dispatches responses; the transport is
an injected ``requests.Session`` (or anything with the same ``prepare_request``
and ``send`` methods).
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import requests
from loguru import logger
from pydantic_core import to_json

from oapi_codec.config import get_settings
from oapi_codec.errors import MissingParameter
from oapi_codec.parser.base import OperationSpec
from oapi_codec.response.base import DecodedResponse, ResponseRule
from oapi_codec.response.dispatch import dispatch
from oapi_codec.style.base import EncodeRequest, Location
from oapi_codec.style.canonical import to_parameter_value
from oapi_codec.style.encode import encode

RequestEditor = Callable[[requests.PreparedRequest], None]

_UNSET: Any = object()


class Client:
    """Client which conforms to the operations of one OpenAPI document.

    Args:
        server: Base URL of the server, e.g. ``https://api.example.com``.
        session: Transport used to send requests; a new ``requests.Session``
            when omitted.
        request_editors: Callbacks run on every prepared request before it
            is sent, e.g. to add authentication.
        timeout: Seconds to wait for the server; defaults to the configured
            ``request_timeout``.
    """

    def __init__(
        self,
        server: str,
        session: requests.Session | None = None,
        request_editors: Sequence[RequestEditor] = (),
        timeout: float | None = _UNSET,
    ):
        self.server = server
        self.session = session or requests.Session()
        self.request_editors = list(request_editors)
        self.timeout = get_settings().request_timeout if timeout is _UNSET else timeout

    def with_base_url(self, base_url: str) -> "Client":
        """Return a client sharing this one's transport but pointed at ``base_url``."""
        if not base_url.endswith("/"):
            base_url += "/"
        return Client(base_url, self.session, self.request_editors, self.timeout)

    def build_request(
        self,
        operation: OperationSpec,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        content_type: str | None = None,
    ) -> requests.Request:
        """Assemble the request for ``operation`` from native parameter values.

        Raises:
            MissingParameter: A required parameter has no value.
            StyleMismatch: A value does not fit its parameter's style.
            UnsupportedShape: A value is nested deeper than its style allows.
        """
        params = params or {}
        path = operation.path
        query: list[str] = []
        cookies: list[str] = []
        headers: dict[str, str] = {}

        for spec in operation.parameters:
            value = params.get(spec.name)
            if value is None:
                if spec.required:
                    raise MissingParameter(spec.name, spec.location.value)
                continue

            fragment = encode(
                EncodeRequest(
                    name=spec.name,
                    value=to_parameter_value(value, spec.name),
                    style=spec.style,
                    explode=spec.explode,
                    location=spec.location,
                )
            )
            if spec.location == Location.PATH:
                path = path.replace("{" + spec.name + "}", fragment)
            elif spec.location == Location.QUERY:
                if fragment:
                    query.append(fragment)
            elif spec.location == Location.HEADER:
                headers[spec.name] = fragment
            else:
                cookies.append(fragment)

        if cookies:
            headers["Cookie"] = "; ".join(cookies)

        url = self.server.rstrip("/") + path
        if query:
            url += "?" + "&".join(query)

        data = None
        if body is not None:
            content_type = content_type or operation.request_content_type or "application/json"
            headers["Content-Type"] = content_type
            data = to_json(body, by_alias=True, exclude_none=True) if "json" in content_type else body

        return requests.Request(operation.method, url, headers=headers, data=data)

    def send(
        self,
        operation: OperationSpec,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        content_type: str | None = None,
    ) -> requests.Response:
        """Build, edit and send the request; return the raw response."""
        prepared = self.session.prepare_request(self.build_request(operation, params, body, content_type))
        for editor in self.request_editors:
            editor(prepared)

        logger.debug("{} {} ({})", prepared.method, prepared.url, operation.operation_id)
        return self.session.send(prepared, timeout=self.timeout)

    def call(
        self,
        operation: OperationSpec,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        content_type: str | None = None,
    ) -> DecodedResponse:
        """Send the request and dispatch the response with the operation's rules.

        Raises:
            PayloadDecodeError: A rule matched but the body did not decode.
        """
        response = self.send(operation, params, body, content_type)
        return dispatch_response(response, operation.rules)


def dispatch_response(response: requests.Response, rules: Sequence[ResponseRule]) -> DecodedResponse:
    """Dispatch a ``requests`` response whose body has been read."""
    return dispatch(
        response.status_code,
        response.headers.get("Content-Type"),
        response.content,
        rules,
        headers=dict(response.headers),
    )

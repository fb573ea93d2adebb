"""Synchronous httpx client with retries driven by :class:`ResilienceConfig`."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import (
        HeaderTypes,
        QueryParamTypes,
        RequestData,
        RequestFiles,
        TimeoutTypes,
        URLTypes,
    )

    from catalogsync.config.http_resilience import ResilienceConfig


class RequestOptions(TypedDict, total=False):
    data: RequestData | None
    files: RequestFiles | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    timeout: TimeoutTypes


class ClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    transport: httpx.BaseTransport


class ResilientClient:
    """``httpx.Client`` whose transport retries according to ``config.retry``.

    ``transport`` replaces the network transport underneath the retry layer;
    tests pass an ``httpx.MockTransport`` here.
    """

    def __init__(
        self, config: ResilienceConfig, *, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.config = config
        retry_transport = RetryTransport(transport=transport, retry=config.retry.build())

        client_kwargs: ClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": retry_transport,
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)
        self._client = httpx.Client(**client_kwargs)

    def __enter__(self) -> ResilientClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self, method: str, url: URLTypes, **kwargs: Unpack[RequestOptions]
    ) -> httpx.Response:
        return self._client.request(method, url, **kwargs)

    def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return self.request("POST", url, **kwargs)

"""Asynchronous API client -- the composition root of the access layer.

:class:`ApiClient` wires together the request builder, an
:class:`httpx.AsyncClient` transport, the error classifier, the decode
pipeline, the retry policy and an optional TTL cache.

One call to :meth:`ApiClient.execute` runs this algorithm:

1. For a GET endpoint with a ``cache_key``, return a live cached value
   without touching the network.
2. Build the request.  A build failure is raised immediately.
3. Send it, classify the outcome, and either decode the body, or ask the
   retry policy whether to wait and try again.  Decode failures and
   non-retryable errors are raised at once.
4. Store a decoded GET result under its ``cache_key`` and return it.

Mutating endpoints (POST, PUT, PATCH, DELETE) never read or write the cache;
call :meth:`ApiClient.invalidate` for the affected keys after they succeed.

Retry waits use :func:`asyncio.sleep`, so cancelling the calling task aborts
a pending wait at once.  :class:`asyncio.CancelledError` propagates as-is:
it is not classified, not reported to failure hooks, and never cached.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar, Union, overload

import httpx

from endpointkit.auth.base import AuthResult
from endpointkit.auth.manager import AuthManager
from endpointkit.cache.base import BaseCache
from endpointkit.client.classifier import classify, classify_decode_failure
from endpointkit.client.request import build_request
from endpointkit.codec import decode
from endpointkit.endpoint import Endpoint
from endpointkit.exceptions import (
    ClassifiedError,
    DecodeFailureError,
    InvalidRequestError,
    UnauthorizedError,
)
from endpointkit.hooks import ClientHooks, FailureEvent, HookRunner, RequestContext
from endpointkit.models import ClientConfig
from endpointkit.output import get_output
from endpointkit.retry import RetryPolicy

T = TypeVar("T")

UnauthorizedHook = Callable[[UnauthorizedError], Union[None, Awaitable[None]]]


class ApiClient:
    """Typed asynchronous HTTP client.

    Must be used as an async context manager, which opens the underlying
    :class:`httpx.AsyncClient` and resolves ambient auth headers once.

    Args:
        config: Immutable client configuration.
        cache: TTL cache for GET results; ``None`` disables caching.
        auth_manager: Resolves ``config.auth`` into ambient headers.  Ignored
            when ``config.auth`` is ``None``.
        hooks: Observers notified of attempts, responses and terminal failures.
        transport: Custom :class:`httpx.AsyncBaseTransport` (tests pass an
            :class:`httpx.MockTransport`).
        on_unauthorized: Called once with the error when a call ends in
            HTTP 401, so the caller can re-authenticate.  May be a coroutine
            function.  The call itself is not retried.
        retry_policy: Overrides the policy derived from ``config.retry``.

    Example::

        async with ApiClient(config, cache=TTLCache(60)) as client:
            user = await client.execute(Endpoint.get("/users/42"), User, cache_key="user:42")
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        cache: Optional[BaseCache] = None,
        auth_manager: Optional[AuthManager] = None,
        hooks: Iterable[ClientHooks] = (),
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[UnauthorizedHook] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._config = config
        self._cache = cache
        self._auth_manager = auth_manager
        self._hooks = HookRunner(hooks)
        self._transport = transport
        self._on_unauthorized = on_unauthorized
        self._retry_policy = retry_policy or RetryPolicy.from_config(config.retry)
        self._auth_result: Optional[AuthResult] = None
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiClient:
        self._client = httpx.AsyncClient(
            timeout=self._config.request.timeout,
            verify=self._config.request.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        if self._auth_manager and self._config.auth:
            self._auth_result = self._auth_manager.authenticate(self._config.auth)
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache(self) -> Optional[BaseCache]:
        return self._cache

    def add_hooks(self, hooks: ClientHooks) -> None:
        self._hooks.add(hooks)

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def prepare(self, endpoint: Endpoint) -> httpx.Request:
        """Build the request for *endpoint* without sending it.

        Raises:
            InvalidRequestError: If the request cannot be built.
        """
        auth = self._auth_result
        return build_request(
            self._config,
            endpoint,
            ambient_headers=auth.headers if auth else None,
            ambient_params=auth.params if auth else None,
        )

    @overload
    async def execute(
        self, endpoint: Endpoint, response_type: type[T], cache_key: Optional[str] = None
    ) -> T: ...

    @overload
    async def execute(
        self, endpoint: Endpoint, response_type: Any = None, cache_key: Optional[str] = None
    ) -> Any: ...

    async def execute(
        self,
        endpoint: Endpoint,
        response_type: Any = None,
        cache_key: Optional[str] = None,
    ) -> Any:
        """Send *endpoint* and decode the response into *response_type*.

        Args:
            endpoint: The endpoint descriptor.
            response_type: Target type for the body (anything
                :class:`pydantic.TypeAdapter` accepts).  ``None`` skips
                decoding and returns ``None``.
            cache_key: Key under which a GET result is cached.  Ignored for
                mutating methods.

        Returns:
            The decoded result.

        Raises:
            ClassifiedError: The classified failure (after retries, where
                the error is retryable).
            asyncio.CancelledError: If the calling task is cancelled.
        """
        output = get_output()
        method = endpoint.method.value
        use_cache = cache_key is not None and self._cache is not None and endpoint.is_read

        if cache_key is not None and not endpoint.is_read:
            output.debug(f"Ignoring cache key {cache_key!r} for mutating {method} {endpoint.path}")

        if use_cache:
            assert self._cache is not None and cache_key is not None
            cached = self._cache.get(cache_key)
            if cached is not None:
                output.debug(f"Cache hit: {cache_key}")
                return cached
            output.debug(f"Cache miss: {cache_key}")

        try:
            request = self.prepare(endpoint)
        except InvalidRequestError as exc:
            self._report_failure(exc, 0, method, endpoint.path, None)
            raise

        result = await self._execute_with_retry(request, response_type)

        if use_cache and result is not None:
            assert self._cache is not None and cache_key is not None
            self._cache.set(cache_key, result)
        return result

    async def get(self, path: str, response_type: Any = None, *, cache_key: Optional[str] = None, **kwargs: Any) -> Any:
        """Execute a GET endpoint built from *path* and ``Endpoint`` keyword arguments."""
        return await self.execute(Endpoint.get(path, **kwargs), response_type, cache_key)

    async def post(self, path: str, response_type: Any = None, **kwargs: Any) -> Any:
        return await self.execute(Endpoint.post(path, **kwargs), response_type)

    async def put(self, path: str, response_type: Any = None, **kwargs: Any) -> Any:
        return await self.execute(Endpoint.put(path, **kwargs), response_type)

    async def patch(self, path: str, response_type: Any = None, **kwargs: Any) -> Any:
        return await self.execute(Endpoint.patch(path, **kwargs), response_type)

    async def delete(self, path: str, response_type: Any = None, **kwargs: Any) -> Any:
        return await self.execute(Endpoint.delete(path, **kwargs), response_type)

    def invalidate(self, key: str) -> None:
        """Drop one cached entry, typically after a successful mutation."""
        if self._cache is not None:
            self._cache.invalidate(key)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _execute_with_retry(self, request: httpx.Request, response_type: Any) -> Any:
        """Send *request* until it succeeds or the retry policy says stop."""
        assert self._client is not None, "Client not initialised -- use as async context manager"

        output = get_output()
        max_attempts = self._config.retry.max_attempts
        method = request.method
        url = str(request.url)
        attempt = 0

        while True:
            ctx = RequestContext(method=method, url=url, headers=dict(request.headers), attempt=attempt)
            self._hooks.run_request(ctx)
            started = time.monotonic()

            status_code: Optional[int] = None
            try:
                response = await self._client.send(request)
            except httpx.RequestError as exc:
                error = classify(transport_error=exc)
            else:
                status_code = response.status_code
                ctx.status_code = status_code
                ctx.elapsed = time.monotonic() - started
                self._hooks.run_response(ctx)
                error = classify(status_code, response.content)
                if error is None:
                    try:
                        return decode(response.content, response_type, self._config.decode)
                    except DecodeFailureError as exc:
                        failure = classify_decode_failure(exc)
                        self._report_failure(failure, attempt + 1, method, url, status_code)
                        raise failure

            assert error is not None
            decision = self._retry_policy.should_retry(attempt, error, max_attempts)
            if not decision.retry:
                if isinstance(error, UnauthorizedError):
                    await self._notify_unauthorized(error)
                self._report_failure(error, attempt + 1, method, url, status_code)
                raise error

            output.debug(
                f"{error.kind.value} on {method} {url}, retrying in {decision.delay}s "
                f"(attempt {attempt + 1}/{max_attempts})"
            )
            await asyncio.sleep(decision.delay)
            attempt += 1

    def _report_failure(
        self,
        error: ClassifiedError,
        attempts: int,
        method: str,
        url: str,
        status_code: Optional[int],
    ) -> None:
        get_output().debug(
            f"{method} {url} failed with {error.kind.value} after {attempts} attempt(s): {error}"
        )
        if self._hooks:
            self._hooks.run_failure(
                FailureEvent(
                    kind=error.kind,
                    attempts=attempts,
                    method=method,
                    url=url,
                    status_code=status_code,
                    error=error,
                )
            )

    async def _notify_unauthorized(self, error: UnauthorizedError) -> None:
        if self._on_unauthorized is None:
            return
        try:
            result = self._on_unauthorized(error)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            get_output().warning(f"on_unauthorized hook raised {type(exc).__name__}: {exc}")

"""Resource repository on top of :class:`~endpointkit.client.ApiClient`.

A :class:`Repository` binds one REST collection (``/users``) to a pydantic
model and owns the cache keys for it:

* ``"<resource>:<id>"`` for single items,
* ``"<resource>:list"`` for the collection.

Reads go through the client's TTL cache; successful mutations invalidate the
keys they affect, so later reads never serve stale data from this process.

Example::

    users = Repository(client, "users", User)
    me = await users.get("me")
    me = await users.update("me", UpdateProfile(bio="Hi"))
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from endpointkit.client.async_client import ApiClient
from endpointkit.endpoint import Endpoint

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """CRUD access to one collection with explicit cache invalidation.

    Args:
        client: An entered :class:`ApiClient`.
        resource: Collection path segment, also used as the cache-key prefix.
        model: Type each item decodes into.
    """

    def __init__(self, client: ApiClient, resource: str, model: type[ModelT]) -> None:
        self._client = client
        self._resource = resource.strip("/")
        self._model = model

    def item_key(self, item_id: Any) -> str:
        return f"{self._resource}:{item_id}"

    @property
    def list_key(self) -> str:
        return f"{self._resource}:list"

    def _item_path(self, item_id: Any) -> str:
        return f"/{self._resource}/{item_id}"

    async def get(self, item_id: Any) -> ModelT:
        return await self._client.execute(
            Endpoint.get(self._item_path(item_id)), self._model, cache_key=self.item_key(item_id)
        )

    async def list(self, query: Optional[dict[str, Any]] = None) -> list[ModelT]:
        """Fetch the collection.  Filtered listings (with *query*) are not cached."""
        endpoint = Endpoint.get(f"/{self._resource}", query=query)
        cache_key = None if query else self.list_key
        return await self._client.execute(endpoint, list[self._model], cache_key=cache_key)

    async def create(self, payload: Any) -> ModelT:
        created = await self._client.execute(
            Endpoint.post(f"/{self._resource}", body=payload), self._model
        )
        self._client.invalidate(self.list_key)
        return created

    async def update(self, item_id: Any, payload: Any) -> ModelT:
        updated = await self._client.execute(
            Endpoint.patch(self._item_path(item_id), body=payload), self._model
        )
        self._client.invalidate(self.item_key(item_id))
        self._client.invalidate(self.list_key)
        return updated

    async def delete(self, item_id: Any) -> None:
        await self._client.execute(Endpoint.delete(self._item_path(item_id)))
        self._client.invalidate(self.item_key(item_id))
        self._client.invalidate(self.list_key)

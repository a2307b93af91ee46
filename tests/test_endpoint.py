"""Tests for endpointkit.endpoint -- descriptors, method coercion, query normalisation."""

from __future__ import annotations

import enum

import pytest

from endpointkit.endpoint import Endpoint, HTTPMethod
from endpointkit.exceptions import InvalidRequestError


class Color(enum.Enum):
    RED = "red"


class TestConstruction:
    def test_defaults(self) -> None:
        ep = Endpoint("/users")
        assert ep.method is HTTPMethod.GET
        assert dict(ep.headers) == {}
        assert ep.query == ()
        assert ep.body is None

    def test_method_string_is_coerced(self) -> None:
        assert Endpoint("/x", "post", body={}).method is HTTPMethod.POST
        assert Endpoint("/x", "Delete").method is HTTPMethod.DELETE

    def test_unknown_method_rejected(self) -> None:
        with pytest.raises(InvalidRequestError, match="Unsupported HTTP method"):
            Endpoint("/x", "TRACE")

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_body_rejected_for_get_and_delete(self, method: str) -> None:
        with pytest.raises(InvalidRequestError, match="cannot carry a body"):
            Endpoint("/x", method, body={"a": 1})

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_body_allowed_for_mutations(self, method: str) -> None:
        assert Endpoint("/x", method, body={"a": 1}).body == {"a": 1}

    def test_factories(self) -> None:
        assert Endpoint.get("/a").method is HTTPMethod.GET
        assert Endpoint.post("/a").method is HTTPMethod.POST
        assert Endpoint.put("/a").method is HTTPMethod.PUT
        assert Endpoint.patch("/a").method is HTTPMethod.PATCH
        assert Endpoint.delete("/a").method is HTTPMethod.DELETE


class TestQuery:
    def test_order_is_preserved(self) -> None:
        ep = Endpoint.get("/x", query=[("b", 2), ("a", 1), ("b", 3)])
        assert ep.query == (("b", "2"), ("a", "1"), ("b", "3"))

    def test_mapping_accepted(self) -> None:
        ep = Endpoint.get("/x", query={"page": 2, "sort": "name"})
        assert ep.query == (("page", "2"), ("sort", "name"))

    def test_value_rendering(self) -> None:
        ep = Endpoint.get("/x", query=[("flag", True), ("off", False), ("c", Color.RED)])
        assert ep.query == (("flag", "true"), ("off", "false"), ("c", "red"))

    @pytest.mark.parametrize(
        "query",
        [["page=2"], ["ab"], [("a", 1, 2)], [("a",)], [7], "page=2"],
        ids=["bare-string", "two-char-string", "triple", "single", "int", "string-query"],
    )
    def test_malformed_items_raise_invalid_request(self, query) -> None:
        with pytest.raises(InvalidRequestError, match="query item"):
            Endpoint.get("/x", query=query)


class TestImmutability:
    def test_frozen(self) -> None:
        ep = Endpoint.get("/x")
        with pytest.raises(AttributeError):
            ep.path = "/y"  # type: ignore[misc]

    def test_headers_read_only(self) -> None:
        source = {"X-Trace": "1"}
        ep = Endpoint.get("/x", headers=source)
        source["X-Trace"] = "2"
        assert ep.headers["X-Trace"] == "1"
        with pytest.raises(TypeError):
            ep.headers["X-Trace"] = "3"  # type: ignore[index]

    def test_hashable_with_unhashable_body(self) -> None:
        a = Endpoint.post("/x", body={"k": [1]})
        b = Endpoint.post("/x", body={"k": [1]})
        assert a == b
        assert hash(a) == hash(b)

    def test_is_read(self) -> None:
        assert Endpoint.get("/x").is_read
        assert not Endpoint.delete("/x").is_read

"""Tests for the shared DynamoDB helpers and repository base class."""

import re
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from legal_dashboard.shared.dynamodb import (
    build_update_expression,
    from_dynamodb,
    now_iso,
    query_all,
    scan_all,
    strip_keys,
    to_dynamodb,
)
from legal_dashboard.app_api.clients.repository import ClientRepository


def test_now_iso_is_utc_with_milliseconds():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", now_iso())


def test_floats_become_decimal_and_back():
    item = {"rate": 1.5, "count": 3, "flag": True, "nested": [{"score": 0.25}]}

    stored = to_dynamodb(item)
    assert stored["rate"] == Decimal("1.5")
    assert stored["nested"][0]["score"] == Decimal("0.25")
    assert stored["flag"] is True

    loaded = from_dynamodb({"rate": Decimal("1.5"), "count": Decimal("3")})
    assert loaded == {"rate": 1.5, "count": 3}
    assert isinstance(loaded["count"], int)


def test_build_update_expression_uses_placeholders():
    expression, names, values = build_update_expression({"name": "Acme", "status": "inactive"})

    assert expression == "SET #a0 = :v0, #a1 = :v1"
    assert names == {"#a0": "name", "#a1": "status"}
    assert values == {":v0": "Acme", ":v1": "inactive"}


def test_build_update_expression_rejects_empty_updates():
    with pytest.raises(ValueError):
        build_update_expression({})


def test_strip_keys():
    assert strip_keys({"clientId": "x", "createdAt": "t", "name": "n"}, ("clientId", "createdAt")) == {"name": "n"}


def test_query_all_follows_pagination():
    table = MagicMock()
    table.query.side_effect = [
        {"Items": [{"id": "1"}], "LastEvaluatedKey": {"id": "1"}},
        {"Items": [{"id": "2", "size": Decimal("10")}]},
    ]

    items = query_all(table, KeyConditionExpression="id = :id")

    assert items == [{"id": "1"}, {"id": "2", "size": 10}]
    assert table.query.call_args_list[1].kwargs["ExclusiveStartKey"] == {"id": "1"}


def test_scan_all_single_page():
    table = MagicMock()
    table.scan.return_value = {"Items": [{"id": "a"}]}

    assert scan_all(table) == [{"id": "a"}]
    table.scan.assert_called_once_with()


class TestRepositoryUpdate:

    def test_update_is_conditional_and_protects_keys(self, dynamo_table):
        dynamo_table.item = {"clientId": "c1", "name": "Old", "createdAt": "2024-01-01T00:00:00.000Z"}
        repository = ClientRepository(table=dynamo_table)

        repository._update_item(
            {"clientId": "c1"},
            {"clientId": "hijack", "createdAt": "never", "name": "New"},
        )

        kwargs = dynamo_table.update_item.call_args.kwargs
        assert kwargs["ConditionExpression"] == "attribute_exists(#k0)"
        assert kwargs["ExpressionAttributeNames"]["#k0"] == "clientId"
        assert kwargs["ReturnValues"] == "ALL_NEW"
        assert "hijack" not in kwargs["ExpressionAttributeValues"].values()
        assert dynamo_table.item["name"] == "New"
        assert dynamo_table.item["createdAt"] == "2024-01-01T00:00:00.000Z"
        assert "updatedAt" in dynamo_table.item

    def test_update_missing_item_returns_none(self, dynamo_table):
        repository = ClientRepository(table=dynamo_table)

        assert repository._update_item({"clientId": "missing"}, {"name": "x"}) is None

    def test_other_client_errors_propagate(self):
        table = MagicMock()
        table.update_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "UpdateItem",
        )
        repository = ClientRepository(table=table)

        with pytest.raises(ClientError):
            repository._update_item({"clientId": "c1"}, {"name": "x"})

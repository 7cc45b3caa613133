"""Base class for single-table DynamoDB repositories."""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from .aws_clients import get_dynamodb_resource
from .dynamodb import build_update_expression, from_dynamodb, now_iso, query_all, strip_keys, to_dynamodb

logger = logging.getLogger(__name__)


class DynamoDBRepository:
    """
    Key-value CRUD over one DynamoDB table.

    Subclasses set ``key_attributes`` and wrap the raw item helpers with
    typed methods for their entity.
    """

    key_attributes: tuple = ()
    immutable_attributes: tuple = ("createdAt",)

    def __init__(self, table_name: str, table: Any = None):
        self.table_name = table_name
        self._table = table if table is not None else get_dynamodb_resource().Table(table_name)

    def _key(self, *values: str) -> Dict[str, str]:
        return dict(zip(self.key_attributes, values))

    def _get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        try:
            response = self._table.get_item(Key=key)
        except ClientError as e:
            logger.error(f"Error getting item {key} from {self.table_name}: {e}")
            raise
        item = response.get("Item")
        return from_dynamodb(item) if item else None

    def _put_item(self, item: Dict[str, Any]) -> None:
        try:
            self._table.put_item(Item=to_dynamodb(item))
        except ClientError as e:
            logger.error(f"Error writing item to {self.table_name}: {e}")
            raise

    def _update_item(self, key: Dict[str, str], updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a SET update to an existing item and return the updated item.

        Key attributes and ``createdAt`` are never overwritten. Returns None
        when the item does not exist.
        """
        data = strip_keys(updates, self.key_attributes + self.immutable_attributes)
        data["updatedAt"] = now_iso()
        expression, names, values = build_update_expression(data)

        condition_names = {f"#k{i}": attr for i, attr in enumerate(key)}
        condition = " AND ".join(f"attribute_exists(#k{i})" for i in range(len(key)))
        names.update(condition_names)

        try:
            response = self._table.update_item(
                Key=key,
                UpdateExpression=expression,
                ConditionExpression=condition,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            logger.error(f"Error updating item {key} in {self.table_name}: {e}")
            raise

        return from_dynamodb(response.get("Attributes", {}))

    def _delete_item(self, key: Dict[str, str]) -> None:
        try:
            self._table.delete_item(Key=key)
        except ClientError as e:
            logger.error(f"Error deleting item {key} from {self.table_name}: {e}")
            raise

    def _query_index(self, index_name: str, attribute: str, value: str) -> List[Dict[str, Any]]:
        try:
            return query_all(
                self._table,
                IndexName=index_name,
                KeyConditionExpression="#attr = :value",
                ExpressionAttributeNames={"#attr": attribute},
                ExpressionAttributeValues={":value": value},
            )
        except ClientError as e:
            logger.error(f"Error querying {self.table_name}.{index_name}: {e}")
            raise

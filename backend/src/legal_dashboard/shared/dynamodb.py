"""DynamoDB helpers shared by the entity repositories."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_dynamodb(value: Any) -> Any:
    """Recursively convert floats to Decimal for DynamoDB writes."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamodb(v) for v in value]
    return value


def from_dynamodb(value: Any) -> Any:
    """Recursively convert Decimal values back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamodb(v) for v in value]
    return value


def build_update_expression(updates: Dict[str, Any]) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """
    Build a SET update expression for the given attributes.

    Attribute names go through placeholders so reserved words such as
    ``name`` and ``status`` are safe to update.

    Returns:
        (UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues)
    """
    if not updates:
        raise ValueError("No attributes to update")

    parts = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    for index, (attr, value) in enumerate(updates.items()):
        names[f"#a{index}"] = attr
        values[f":v{index}"] = to_dynamodb(value)
        parts.append(f"#a{index} = :v{index}")

    return "SET " + ", ".join(parts), names, values


def strip_keys(updates: Dict[str, Any], protected: Iterable[str]) -> Dict[str, Any]:
    """Drop key and audit attributes that callers may not overwrite."""
    blocked = set(protected)
    return {k: v for k, v in updates.items() if k not in blocked}


def query_all(table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until exhausted."""
    response = table.query(**kwargs)
    items = response.get("Items", [])

    while "LastEvaluatedKey" in response:
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return [from_dynamodb(item) for item in items]


def scan_all(table: Any, **kwargs: Any) -> List[Dict[str, Any]]:
    """Run a scan and follow LastEvaluatedKey until exhausted."""
    response = table.scan(**kwargs)
    items = response.get("Items", [])

    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return [from_dynamodb(item) for item in items]

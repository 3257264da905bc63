"""
DynamoDB single-table client.

Supports both DynamoDB Local (development) and AWS DynamoDB (production).
Set DYNAMODB_ENDPOINT env var for local, omit for AWS.

DynamoDB has no float type: numbers are written as Decimal and read back
as int or float, so callers only ever see plain JSON-compatible values.
Every boto failure surfaces as PersistenceError.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from waylo.utils.error_handling import PersistenceError, ResourceNotFoundError
from waylo.utils.logging import get_logger

logger = get_logger(__name__)


def to_dynamo(value: Any) -> Any:
    """Convert floats (at any depth) to Decimal for boto3."""
    return json.loads(json.dumps(value, default=str), parse_float=Decimal)


def from_dynamo(value: Any) -> Any:
    """Convert Decimal values (at any depth) back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise boto failures as PersistenceError for the given operation."""
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        logger.error(f"DynamoDB {operation} failed: {e}")
        raise PersistenceError(str(e), operation=operation, original_error=e) from e


class DynamoDBClient:
    """Client for DynamoDB single-table operations."""

    def __init__(
        self,
        table_name: str,
        region: str = "eu-south-1",
        endpoint_url: str | None = None,
    ):
        self.table_name = table_name
        kwargs: dict[str, Any] = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
            logger.info(f"Using DynamoDB Local at {endpoint_url}")

        resource = boto3.resource("dynamodb", **kwargs)
        self.table = resource.Table(table_name)

    def put_item(self, item: dict[str, Any]) -> None:
        """Put an item into the table."""
        with store_errors("put"):
            self.table.put_item(Item=to_dynamo(item))

    def get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        """Get a single item by PK and SK."""
        with store_errors("get"):
            response = self.table.get_item(Key={"PK": pk, "SK": sk})
        item = response.get("Item")
        return from_dynamo(item) if item else None

    def query(
        self,
        pk: str,
        sk_prefix: str | None = None,
        index_name: str | None = None,
        limit: int | None = None,
        scan_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Query items by partition key with an optional sort key prefix.

        Args:
            pk: Partition key value
            sk_prefix: Sort key prefix (begins_with)
            index_name: GSI name (e.g., "GSI1")
            limit: Max items to return
            scan_forward: True for ascending, False for descending
        """
        pk_attr = "GSI1PK" if index_name else "PK"
        sk_attr = "GSI1SK" if index_name else "SK"

        key_condition = Key(pk_attr).eq(pk)
        if sk_prefix:
            key_condition = key_condition & Key(sk_attr).begins_with(sk_prefix)

        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": scan_forward,
        }
        if index_name:
            kwargs["IndexName"] = index_name
        if limit:
            kwargs["Limit"] = limit

        items: list[dict[str, Any]] = []
        with store_errors("query"):
            while True:
                response = self.table.query(**kwargs)
                items.extend(from_dynamo(item) for item in response.get("Items", []))

                # Results are paged at 1 MB
                last_key = response.get("LastEvaluatedKey")
                if not last_key or (limit and len(items) >= limit):
                    break
                kwargs["ExclusiveStartKey"] = last_key

        return items[:limit] if limit else items

    def query_gsi1(
        self,
        gsi1pk: str,
        sk_prefix: str | None = None,
        limit: int | None = None,
        scan_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """Query GSI1 index."""
        return self.query(
            pk=gsi1pk,
            sk_prefix=sk_prefix,
            index_name="GSI1",
            limit=limit,
            scan_forward=scan_forward,
        )

    def update_item(
        self,
        pk: str,
        sk: str,
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Set specific attributes of an existing item. Last writer wins;
        the item must already exist.
        """
        expr_parts = []
        expr_values = {}
        expr_names = {}

        for i, (key, value) in enumerate(updates.items()):
            placeholder = f":val{i}"
            name_placeholder = f"#attr{i}"
            expr_parts.append(f"{name_placeholder} = {placeholder}")
            expr_values[placeholder] = to_dynamo(value)
            expr_names[name_placeholder] = key

        try:
            with store_errors("update"):
                response = self.table.update_item(
                    Key={"PK": pk, "SK": sk},
                    UpdateExpression="SET " + ", ".join(expr_parts),
                    ConditionExpression=Attr("PK").exists(),
                    ExpressionAttributeValues=expr_values,
                    ExpressionAttributeNames=expr_names,
                    ReturnValues="ALL_NEW",
                )
        except PersistenceError as e:
            if _is_condition_failure(e.original_error):
                raise ResourceNotFoundError(f"Item {pk} not found") from e
            raise
        return from_dynamo(response.get("Attributes", {}))

    def delete_item(self, pk: str, sk: str) -> None:
        """Delete an item by PK and SK."""
        with store_errors("delete"):
            self.table.delete_item(Key={"PK": pk, "SK": sk})

    def create_table_if_not_exists(self) -> None:
        """Create the table (for DynamoDB Local development)."""
        try:
            self.table.load()
            logger.info(f"Table {self.table_name} already exists")
            return
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
                raise PersistenceError(str(e), operation="describe", original_error=e) from e

        with store_errors("create_table"):
            self.table.meta.client.create_table(
                TableName=self.table_name,
                KeySchema=[
                    {"AttributeName": "PK", "KeyType": "HASH"},
                    {"AttributeName": "SK", "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": "PK", "AttributeType": "S"},
                    {"AttributeName": "SK", "AttributeType": "S"},
                    {"AttributeName": "GSI1PK", "AttributeType": "S"},
                    {"AttributeName": "GSI1SK", "AttributeType": "S"},
                ],
                GlobalSecondaryIndexes=[
                    {
                        "IndexName": "GSI1",
                        "KeySchema": [
                            {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                            {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
                        ],
                        "Projection": {"ProjectionType": "ALL"},
                    }
                ],
                BillingMode="PAY_PER_REQUEST",
            )
        logger.info(f"Created table {self.table_name}")


def _is_condition_failure(error: Exception | None) -> bool:
    return (
        isinstance(error, ClientError)
        and error.response.get("Error", {}).get("Code")
        == "ConditionalCheckFailedException"
    )

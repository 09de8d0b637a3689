# PURPOSE: Helper functions to interact with DynamoDB for session storage.
# CONTEXT: Backs the "dynamodb" session store; each record is keyed by session_id.
# CREDITS: Original work – no external code reuse.

from __future__ import annotations
import os
import json
from decimal import Decimal
from typing import Any, Dict, Optional
import boto3
from botocore.exceptions import ClientError


def _table():
    """Table handle built per call so region/table env changes (and test mocks) apply."""
    name = os.getenv("DDB_SESSION_TABLE", "navigator_sessions")
    region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "eu-west-2"
    return boto3.resource("dynamodb", region_name=region).Table(name)


def _to_dynamo(value: Any) -> Any:
    """DynamoDB rejects floats; round-trip through JSON so every float becomes a Decimal."""
    return json.loads(json.dumps(value), parse_float=Decimal)


def get_item(session_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve one item (by session_id) from DynamoDB.

    returns:
    - dict or None – the stored record, or None if not found.

    raises:
    - RuntimeError – if the DynamoDB request fails.
    """
    try:
        res = _table().get_item(Key={"session_id": session_id})
        return res.get("Item")
    except ClientError as e:
        raise RuntimeError(f"DDB get_item failed: {e.response['Error']['Message']}")


def put_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert or replace a full record (must include 'session_id').

    raises:
    - RuntimeError – if DynamoDB put_item fails.
    """
    try:
        _table().put_item(Item=_to_dynamo(item))
        return {"ok": True}
    except ClientError as e:
        raise RuntimeError(f"DDB put_item failed: {e.response['Error']['Message']}")


def update_json(session_id: str, path: str, value: Any) -> Dict[str, Any]:
    """
    Update a single top-level attribute in a DynamoDB item.

    parameters:
    - session_id: str – which record to update.
    - path: str – top-level field name (e.g. 'state' or 'trace').
    - value: Any – the new value to set.

    raises:
    - RuntimeError – if the update fails.
    """
    try:
        _table().update_item(
            Key={"session_id": session_id},
            UpdateExpression="SET #k = :v",
            ExpressionAttributeNames={"#k": path},
            ExpressionAttributeValues={":v": _to_dynamo(value)},
        )
        return {"ok": True}
    except ClientError as e:
        raise RuntimeError(f"DDB update_item failed: {e.response['Error']['Message']}")

"""
Porkbun JSON envelope encoding and decoding

Every response has the shape
    {"status": "SUCCESS" | "ERROR", "message": "...", <payload field>: ...}

Decoding is done in three steps so that each failure class can be told
apart: the body must be a JSON object with a known status (otherwise the
response is malformed), an ERROR status must explain itself (ApiError), and
only then is the payload field validated against the operation's schema.
"""

import json
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Optional

from pydantic import ValidationError

from .errors import ApiError, MalformedResponseError
from .types import REQUIRED, Credentials, Envelope, PayloadSchema, Status


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (IPv4Address, IPv6Address)):
        return str(value)
    return value


def encode_authenticated_body(credentials: Credentials, **fields: Any) -> bytes:
    """
    Build a request body carrying the API keys and the given fields.

    Fields set to None are left out of the body so the provider applies
    its own defaults.
    """
    body = {
        "secretapikey": credentials.secret_api_key,
        "apikey": credentials.api_key,
    }
    for key, value in fields.items():
        if value is not None:
            body[key] = _to_json_value(value)
    return json.dumps(body).encode()


def ping_body(credentials: Credentials) -> bytes:
    """The ping endpoint takes the key file exactly as stored on disk"""
    return credentials.key_file.encode()


def decode_envelope(
    response: str | bytes, schema: Optional[PayloadSchema] = None
) -> Envelope:
    """
    Decode a response envelope and validate its payload.

    Args:
        response: Raw response body
        schema: Payload field expected on success, None if the operation
            returns nothing but a status

    Returns:
        Envelope with the validated payload (None if no schema was given)

    Raises:
        MalformedResponseError: The body is not a valid envelope
        ApiError: The provider reported an error
    """
    if isinstance(response, bytes):
        try:
            response = response.decode()
        except UnicodeDecodeError as e:
            raise MalformedResponseError(
                response.decode(errors="replace"), f"invalid UTF-8: {e}"
            ) from e

    try:
        data = json.loads(response)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(response, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError(response, "top level value is not an object")

    if "status" not in data:
        raise MalformedResponseError(response, "missing field `status`")
    try:
        status = Status(data["status"])
    except ValueError:
        raise MalformedResponseError(
            response, f"unknown status {data['status']!r}"
        ) from None

    message = data.get("message", "")

    if status is Status.ERROR:
        # A failure without an explanation is a protocol violation
        if not isinstance(message, str) or not message:
            raise MalformedResponseError(
                response, "error response without a message"
            )
        raise ApiError(message)

    if not isinstance(message, str):
        message = ""

    if schema is None:
        return Envelope(status, message, None)

    if schema.field in data:
        value = data[schema.field]
    elif schema.default is REQUIRED:
        raise MalformedResponseError(response, f"missing field `{schema.field}`")
    else:
        value = schema.default

    try:
        payload = schema.adapter.validate_python(value)
    except ValidationError as e:
        raise MalformedResponseError(
            response, f"invalid field `{schema.field}`: {e}"
        ) from e

    return Envelope(status, message, payload)

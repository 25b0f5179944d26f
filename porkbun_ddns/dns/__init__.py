"""
Porkbun DNS

Client for the Porkbun JSON API and the reconciliation logic used to keep
address records pointed at the current public address.
"""

from .client import PorkbunClient
from .codec import decode_envelope, encode_authenticated_body, ping_body
from .errors import (
    AddressUnavailableError,
    ApiError,
    CredentialParseError,
    KeyFileError,
    MalformedResponseError,
    PorkbunError,
    TransportError,
    UnexpectedAddressFamilyError,
)
from .manager import DDNSUpdater, UpdateResult, count_failures
from .types import (
    AddressFamily,
    AddressRecord,
    Credentials,
    DnsRecord,
    Envelope,
    Ipv4Record,
    Ipv6Record,
    PayloadSchema,
    RecordType,
    Status,
)
from .utils import Decision, Reconciliation, reconcile, target_name

__all__ = [
    "PorkbunClient",
    "DDNSUpdater",
    "UpdateResult",
    "count_failures",
    "decode_envelope",
    "encode_authenticated_body",
    "ping_body",
    "AddressFamily",
    "AddressRecord",
    "Credentials",
    "DnsRecord",
    "Envelope",
    "Ipv4Record",
    "Ipv6Record",
    "PayloadSchema",
    "RecordType",
    "Status",
    "Decision",
    "Reconciliation",
    "reconcile",
    "target_name",
    "PorkbunError",
    "KeyFileError",
    "CredentialParseError",
    "TransportError",
    "MalformedResponseError",
    "ApiError",
    "UnexpectedAddressFamilyError",
    "AddressUnavailableError",
]

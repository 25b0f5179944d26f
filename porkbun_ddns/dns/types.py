"""
Porkbun API type definitions
"""

from enum import Enum, IntEnum
from ipaddress import IPv4Address, IPv6Address
from typing import Annotated, Any, Generic, NamedTuple, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    field_validator,
)

IPAddressT = IPv4Address | IPv6Address
AddressT = TypeVar("AddressT", IPv4Address, IPv6Address)


def _require_text(value: Any) -> Any:
    # Addresses are sent as strings; a JSON number must not become an address
    if not isinstance(value, (str, IPv4Address, IPv6Address)):
        raise ValueError(f"expected an address string, got {type(value).__name__}")
    return value


class Status(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class RecordType(str, Enum):
    A = "A"
    MX = "MX"
    CNAME = "CNAME"
    ALIAS = "ALIAS"
    TXT = "TXT"
    NS = "NS"
    AAAA = "AAAA"
    SRV = "SRV"
    TLSA = "TLSA"
    CAA = "CAA"
    HTTPS = "HTTPS"
    SVCB = "SVCB"


class AddressFamily(IntEnum):
    IPV4 = 4
    IPV6 = 6

    @property
    def record_type(self) -> RecordType:
        return RecordType.A if self is AddressFamily.IPV4 else RecordType.AAAA

    @property
    def address_class(self) -> type[IPv4Address] | type[IPv6Address]:
        return IPv4Address if self is AddressFamily.IPV4 else IPv6Address


class Credentials(BaseModel):
    """
    Porkbun API keys.

    `key_file` keeps the original text of the key file. The ping endpoint
    expects exactly the shape of that file, so it is sent as-is rather than
    re-serialised from the parsed keys.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(alias="apikey", repr=False)
    secret_api_key: str = Field(alias="secretapikey", repr=False)
    key_file: str = Field(default="", exclude=True, repr=False)

    @classmethod
    def from_key_file(cls, text: str) -> "Credentials":
        keys = cls.model_validate_json(text)
        return keys.model_copy(update={"key_file": text})


class DnsRecord(BaseModel):
    """DNS record of any type, as listed by the provider"""

    id: str
    name: str
    type: RecordType
    content: str
    ttl: str
    prio: str | None = None
    notes: str | None = None


class AddressRecord(BaseModel, Generic[AddressT]):
    """A or AAAA record whose content is parsed into an IP address"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    address: AddressT = Field(alias="content")
    ttl: str
    prio: str | None = None
    notes: str | None = None

    @field_validator("address", mode="before")
    @classmethod
    def _address_from_text(cls, value):
        return _require_text(value)


Ipv4Record = AddressRecord[IPv4Address]
Ipv6Record = AddressRecord[IPv6Address]

RecordListT = list[DnsRecord]
Ipv4RecordListT = list[Ipv4Record]
Ipv6RecordListT = list[Ipv6Record]


class Envelope(NamedTuple):
    """Decoded response envelope"""

    status: Status
    message: str
    payload: Any


# Marks a payload field that must be present in a successful response
REQUIRED: Any = object()


class PayloadSchema(NamedTuple):
    """
    Shape of the operation specific part of a response.

    `default` is the JSON value substituted when the provider omits the
    field, or REQUIRED if the field must be present.
    """

    field: str
    adapter: TypeAdapter
    default: Any = REQUIRED


RecordId = Annotated[StrictInt, Field(ge=0, lt=2**32)]
PingAddress = Annotated[IPAddressT, BeforeValidator(_require_text)]

PING_SCHEMA = PayloadSchema("yourIp", TypeAdapter(PingAddress | None), None)
RECORDS_SCHEMA = PayloadSchema("records", TypeAdapter(RecordListT), [])
IPV4_RECORDS_SCHEMA = PayloadSchema("records", TypeAdapter(Ipv4RecordListT), [])
IPV6_RECORDS_SCHEMA = PayloadSchema("records", TypeAdapter(Ipv6RecordListT), [])
CREATE_SCHEMA = PayloadSchema("id", TypeAdapter(RecordId | None), None)

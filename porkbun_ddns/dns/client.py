"""
Porkbun DNS API client

Synchronous client for the Porkbun JSON API (v3). Every method performs a
single POST request; nothing is cached or retried.
"""

from ipaddress import IPv4Address, IPv6Address
from pathlib import Path
from typing import Optional

import httpx
from pydantic import ValidationError

from ..logger import logger
from .codec import decode_envelope, encode_authenticated_body, ping_body
from .errors import (
    CredentialParseError,
    KeyFileError,
    TransportError,
    UnexpectedAddressFamilyError,
)
from .types import (
    CREATE_SCHEMA,
    IPV4_RECORDS_SCHEMA,
    IPV6_RECORDS_SCHEMA,
    PING_SCHEMA,
    RECORDS_SCHEMA,
    AddressFamily,
    Credentials,
    IPAddressT,
    Ipv4RecordListT,
    Ipv6RecordListT,
    PayloadSchema,
    RecordListT,
    RecordType,
)


class PorkbunClient:
    """
    Client for the Porkbun DNS API.

    Owns the API keys and an httpx connection pool. Safe to reuse for many
    sequential calls; not meant to be shared between threads.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        host: str = "porkbun.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._credentials = credentials
        self._client = httpx.Client(timeout=timeout, transport=transport)

        self._base_url = f"https://api.{host}/api/json/v3/"
        # api-ipv4 only has an A record, which forces the request over IPv4
        self._ipv4_base_url = f"https://api-ipv4.{host}/api/json/v3/"

    @classmethod
    def open_keys(cls, path: str | Path, **kwargs) -> "PorkbunClient":
        """
        Open a Porkbun API key file.

        This is a JSON file formatted the way the ping endpoint expects:
            {"secretapikey": "YOUR_SECRET_API_KEY", "apikey": "YOUR_API_KEY"}

        Raises:
            KeyFileError: The file could not be read
            CredentialParseError: The file is not JSON or a key is missing
        """
        try:
            key_file = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise KeyFileError(path, e) from e

        try:
            credentials = Credentials.from_key_file(key_file)
        except ValidationError as e:
            raise CredentialParseError(path, str(e)) from e

        return cls(credentials, **kwargs)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def _post(
        self, url: str, body: bytes, schema: Optional[PayloadSchema] = None
    ):
        logger.info(f"POST {url}")
        try:
            response = self._client.post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
            content = response.content
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(url, e) from e
        logger.debug(f"response ({response.status_code}): {response.text}")

        envelope = decode_envelope(content, schema)
        logger.debug(f"parsed payload: {envelope.payload!r}")
        return envelope.payload

    def _by_name_type_url(
        self,
        action: str,
        domain: str,
        record_type: RecordType,
        subdomain: Optional[str],
    ) -> str:
        # The subdomain is used as a raw path segment, it is not escaped
        return (
            f"{self._base_url}dns/{action}/{domain}/{record_type.value}/"
            f"{subdomain or ''}"
        )

    # Authentication

    def ping(self) -> Optional[IPAddressT]:
        """
        Test authentication and return the address the request came from.

        The general endpoint is dual-stack, so this may be either family.
        """
        return self._post(
            self._base_url + "ping", ping_body(self._credentials), PING_SCHEMA
        )

    def ping_ipv4(self) -> Optional[IPv4Address]:
        """Return the public IPv4 address, using the IPv4-only endpoint."""
        address = self._post(
            self._ipv4_base_url + "ping", ping_body(self._credentials), PING_SCHEMA
        )
        if address is not None and not isinstance(address, IPv4Address):
            raise UnexpectedAddressFamilyError(4, address)
        return address

    def ping_ipv6(self) -> Optional[IPv6Address]:
        """
        Return the public IPv6 address.

        There is no IPv6-only endpoint; an IPv4 answer from the general one
        means the host has no IPv6 connectivity to the provider.
        """
        address = self.ping()
        if address is not None and not isinstance(address, IPv6Address):
            raise UnexpectedAddressFamilyError(6, address)
        return address

    def ping_family(self, family: AddressFamily) -> Optional[IPAddressT]:
        if family is AddressFamily.IPV4:
            return self.ping_ipv4()
        return self.ping_ipv6()

    # Fetch records

    def fetch_records(self, domain: str) -> RecordListT:
        """
        Fetch all DNS records for a domain.

        These can be of any type and with any name. Use fetch_ipv4_records
        or fetch_ipv6_records when only address records are of interest.
        """
        return self._post(
            f"{self._base_url}dns/retrieve/{domain}",
            encode_authenticated_body(self._credentials),
            RECORDS_SCHEMA,
        )

    def fetch_ipv4_records(
        self, domain: str, subdomain: Optional[str] = None
    ) -> Ipv4RecordListT:
        """Fetch the A records of a domain, optionally for one subdomain."""
        return self._post(
            self._by_name_type_url("retrieveByNameType", domain, RecordType.A, subdomain),
            encode_authenticated_body(self._credentials),
            IPV4_RECORDS_SCHEMA,
        )

    def fetch_ipv6_records(
        self, domain: str, subdomain: Optional[str] = None
    ) -> Ipv6RecordListT:
        """Fetch the AAAA records of a domain, optionally for one subdomain."""
        return self._post(
            self._by_name_type_url(
                "retrieveByNameType", domain, RecordType.AAAA, subdomain
            ),
            encode_authenticated_body(self._credentials),
            IPV6_RECORDS_SCHEMA,
        )

    def fetch_address_records(
        self, domain: str, family: AddressFamily, subdomain: Optional[str] = None
    ) -> Ipv4RecordListT | Ipv6RecordListT:
        if family is AddressFamily.IPV4:
            return self.fetch_ipv4_records(domain, subdomain)
        return self.fetch_ipv6_records(domain, subdomain)

    # Create records

    def create_record(
        self,
        domain: str,
        record_type: RecordType,
        content: str,
        *,
        name: Optional[str] = None,
        ttl: Optional[str] = None,
        prio: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        """
        Create a DNS record.

        Args:
            domain: Domain the record belongs to
            record_type: Record type
            content: Record content, e.g. the IP address for A/AAAA records
            name: Subdomain label, None or empty for the domain itself
            ttl: Time to live in seconds, provider default if None
            prio: Priority, provider default if None
            notes: Free text notes

        Returns:
            The id of the new record, if the provider returned one
        """
        return self._post(
            f"{self._base_url}dns/create/{domain}",
            encode_authenticated_body(
                self._credentials,
                name=name,
                type=record_type,
                content=content,
                ttl=ttl,
                prio=prio,
                notes=notes,
            ),
            CREATE_SCHEMA,
        )

    # Edit records

    def edit_by_name_type(
        self,
        domain: str,
        record_type: RecordType,
        content: str,
        *,
        subdomain: Optional[str] = None,
        ttl: Optional[str] = None,
        prio: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        """
        Replace the content of the records matching a subdomain and type.

        The provider answers with an ApiError if no such record exists.
        """
        self._post(
            self._by_name_type_url("editByNameType", domain, record_type, subdomain),
            encode_authenticated_body(
                self._credentials,
                type=record_type,
                content=content,
                ttl=ttl,
                prio=prio,
                notes=notes,
            ),
        )

    def edit_ipv4_address(
        self, domain: str, subdomain: Optional[str], address: IPv4Address
    ) -> None:
        if not isinstance(address, IPv4Address):
            raise UnexpectedAddressFamilyError(4, address)
        self.edit_by_name_type(
            domain, RecordType.A, str(address), subdomain=subdomain
        )

    def edit_ipv6_address(
        self, domain: str, subdomain: Optional[str], address: IPv6Address
    ) -> None:
        if not isinstance(address, IPv6Address):
            raise UnexpectedAddressFamilyError(6, address)
        self.edit_by_name_type(
            domain, RecordType.AAAA, str(address), subdomain=subdomain
        )

    def close(self):
        """Close the underlying HTTP connection pool"""
        self._client.close()

    def __enter__(self) -> "PorkbunClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

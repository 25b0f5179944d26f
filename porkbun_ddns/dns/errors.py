"""
Exceptions raised by the Porkbun client
"""

from ipaddress import IPv4Address, IPv6Address


class PorkbunError(Exception):
    """Base class for every error raised by this package"""


class KeyFileError(PorkbunError):
    """The API key file could not be read"""

    def __init__(self, path, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"failed to read key file {path}: {error}")


class CredentialParseError(PorkbunError):
    """The API key file is not JSON or lacks one of the required keys"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid key file {path}: {reason}")


class TransportError(PorkbunError):
    """The HTTP request itself failed (DNS, connection, TLS, timeout)"""

    def __init__(self, url: str, error: Exception):
        self.url = url
        self.error = error
        super().__init__(f"request to {url} failed: {type(error).__name__}: {error}")


class MalformedResponseError(PorkbunError):
    """The provider answered with something that is not a valid envelope"""

    def __init__(self, response: str, reason: str):
        self.response = response
        self.reason = reason
        super().__init__(
            f"porkbun API returned an unrecognized response ({response}): {reason}"
        )


class ApiError(PorkbunError):
    """The provider explicitly rejected the request"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f'porkbun API returned an error: "{message}"')


class UnexpectedAddressFamilyError(PorkbunError):
    """An address of the other IP family was returned or supplied"""

    def __init__(self, expected: int, address: IPv4Address | IPv6Address):
        self.expected = expected
        self.address = address
        super().__init__(
            f"expected an IPv{expected} address, got IPv{address.version} address {address}"
        )


class AddressUnavailableError(PorkbunError):
    """Ping succeeded but the provider did not report an address"""

    def __init__(self, family: int):
        self.family = family
        super().__init__(f"ping response contains no IPv{family} address")

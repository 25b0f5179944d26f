import json
from ipaddress import IPv4Address, IPv6Address

import httpx
import pytest

from porkbun_ddns.dns.client import PorkbunClient
from porkbun_ddns.dns.errors import (
    ApiError,
    CredentialParseError,
    KeyFileError,
    MalformedResponseError,
    TransportError,
    UnexpectedAddressFamilyError,
)
from porkbun_ddns.dns.types import AddressFamily, Credentials, RecordType

KEY_FILE = '{"secretapikey": "sk", "apikey": "ak"}'


class MockPorkbun:
    """Records requests and answers each one with the next queued response"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    @property
    def last_url(self) -> str:
        return str(self.requests[-1].url)


def make_client(*responses, host="porkbun.com"):
    server = MockPorkbun(*responses)
    client = PorkbunClient(
        Credentials.from_key_file(KEY_FILE),
        host=host,
        transport=httpx.MockTransport(server),
    )
    return client, server


def a_record(name="example.com", content="1.2.3.4", **extra):
    return {
        "id": "123",
        "name": name,
        "type": "A",
        "content": content,
        "ttl": "600",
        "prio": "0",
        "notes": "",
        **extra,
    }


class TestOpenKeys:
    def test_open_keys(self, key_file):
        client = PorkbunClient.open_keys(key_file)
        try:
            assert client.credentials.api_key == "ak"
            assert client.credentials.secret_api_key == "sk"
            assert client.credentials.key_file == key_file.read_text()
        finally:
            client.close()

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeyFileError):
            PorkbunClient.open_keys(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            '{"apikey": "ak"}',
            '{"apikey": "ak", "secretapikey": 5}',
            '["ak", "sk"]',
            '{"api_key": "ak", "secret_api_key": "sk"}',
        ],
    )
    def test_invalid_file(self, tmp_path, content):
        path = tmp_path / "keys.json"
        path.write_text(content)
        with pytest.raises(CredentialParseError):
            PorkbunClient.open_keys(path)

    def test_secrets_not_in_repr(self):
        credentials = Credentials.from_key_file(KEY_FILE)
        assert "sk" not in repr(credentials)
        assert "ak" not in repr(credentials)


class TestPing:
    def test_ping_sends_key_file(self):
        client, server = make_client({"status": "SUCCESS", "yourIp": "1.2.3.4"})

        assert client.ping() == IPv4Address("1.2.3.4")

        request = server.requests[0]
        assert request.method == "POST"
        assert server.last_url == "https://api.porkbun.com/api/json/v3/ping"
        assert request.content == KEY_FILE.encode()

    def test_ping_ipv4_uses_ipv4_host(self):
        client, server = make_client({"status": "SUCCESS", "yourIp": "1.2.3.4"})

        assert client.ping_ipv4() == IPv4Address("1.2.3.4")
        assert server.last_url == "https://api-ipv4.porkbun.com/api/json/v3/ping"

    def test_ping_ipv4_rejects_ipv6(self):
        client, _ = make_client({"status": "SUCCESS", "yourIp": "2001:db8::1"})

        with pytest.raises(UnexpectedAddressFamilyError) as exc_info:
            client.ping_ipv4()
        assert exc_info.value.expected == 4
        assert exc_info.value.address == IPv6Address("2001:db8::1")

    def test_ping_ipv6(self):
        client, server = make_client({"status": "SUCCESS", "yourIp": "2001:db8::1"})

        assert client.ping_ipv6() == IPv6Address("2001:db8::1")
        assert server.last_url == "https://api.porkbun.com/api/json/v3/ping"

    def test_ping_ipv6_rejects_ipv4(self):
        client, _ = make_client({"status": "SUCCESS", "yourIp": "1.2.3.4"})

        with pytest.raises(UnexpectedAddressFamilyError):
            client.ping_ipv6()

    def test_ping_without_address(self):
        client, _ = make_client({"status": "SUCCESS"}, {"status": "SUCCESS"})

        assert client.ping_ipv4() is None
        assert client.ping_ipv6() is None

    def test_ping_family(self):
        client, server = make_client(
            {"status": "SUCCESS", "yourIp": "1.2.3.4"},
            {"status": "SUCCESS", "yourIp": "::1"},
        )

        assert client.ping_family(AddressFamily.IPV4) == IPv4Address("1.2.3.4")
        assert client.ping_family(AddressFamily.IPV6) == IPv6Address("::1")
        assert server.requests[0].url.host == "api-ipv4.porkbun.com"
        assert server.requests[1].url.host == "api.porkbun.com"

    def test_custom_host(self):
        client, server = make_client(
            {"status": "SUCCESS", "yourIp": "1.2.3.4"}, host="example.test"
        )
        client.ping_ipv4()
        assert server.last_url == "https://api-ipv4.example.test/api/json/v3/ping"

    def test_api_error(self):
        client, _ = make_client(
            httpx.Response(
                400, json={"status": "ERROR", "message": "Invalid API key. (002)"}
            )
        )

        with pytest.raises(ApiError, match=r"Invalid API key\. \(002\)"):
            client.ping()

    def test_transport_error(self):
        client, _ = make_client(httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError) as exc_info:
            client.ping()
        assert exc_info.value.url == "https://api.porkbun.com/api/json/v3/ping"
        assert isinstance(exc_info.value.error, httpx.ConnectError)

    def test_unusable_url_is_a_transport_error(self):
        client, server = make_client()

        with pytest.raises(TransportError) as exc_info:
            client.fetch_ipv4_records("example.com", "bad\x00label")
        assert isinstance(exc_info.value.error, httpx.InvalidURL)
        assert server.requests == []

    def test_malformed_response(self):
        client, _ = make_client(httpx.Response(502, text="<html>Bad Gateway</html>"))

        with pytest.raises(MalformedResponseError):
            client.ping()


class TestFetchRecords:
    def test_fetch_records(self):
        client, server = make_client(
            {
                "status": "SUCCESS",
                "records": [
                    a_record(),
                    a_record(type="MX", content="mail.example.com", prio="10"),
                ],
            }
        )

        records = client.fetch_records("example.com")

        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/retrieve/example.com"
        )
        assert server.last_body == {"secretapikey": "sk", "apikey": "ak"}
        assert [r.type for r in records] == [RecordType.A, RecordType.MX]
        assert records[1].prio == "10"

    def test_fetch_ipv4_records(self):
        client, server = make_client({"status": "SUCCESS", "records": [a_record()]})

        records = client.fetch_ipv4_records("example.com")

        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/retrieveByNameType/example.com/A/"
        )
        assert records[0].address == IPv4Address("1.2.3.4")

    def test_fetch_ipv4_records_with_subdomain(self):
        client, server = make_client({"status": "SUCCESS", "records": []})

        assert client.fetch_ipv4_records("example.com", "www") == []
        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/retrieveByNameType/example.com/A/www"
        )

    def test_fetch_ipv6_records(self):
        client, server = make_client(
            {
                "status": "SUCCESS",
                "records": [a_record(type="AAAA", content="2001:db8::1")],
            }
        )

        records = client.fetch_address_records(
            "example.com", AddressFamily.IPV6, "www"
        )

        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/retrieveByNameType/example.com/AAAA/www"
        )
        assert records[0].address == IPv6Address("2001:db8::1")

    def test_fetch_records_missing_list(self):
        client, _ = make_client({"status": "SUCCESS"})
        assert client.fetch_records("example.com") == []

    def test_fetch_records_api_error(self):
        client, _ = make_client({"status": "ERROR", "message": "Invalid domain."})
        with pytest.raises(ApiError):
            client.fetch_records("example.com")


class TestCreateRecord:
    def test_create_record(self):
        client, server = make_client({"status": "SUCCESS", "id": 106926659})

        record_id = client.create_record(
            "example.com", RecordType.A, "1.2.3.4", name="www", ttl="600"
        )

        assert record_id == 106926659
        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/create/example.com"
        )
        assert server.last_body == {
            "secretapikey": "sk",
            "apikey": "ak",
            "name": "www",
            "type": "A",
            "content": "1.2.3.4",
            "ttl": "600",
        }

    def test_create_record_without_id(self):
        client, server = make_client({"status": "SUCCESS"})

        assert client.create_record("example.com", RecordType.TXT, "hello") is None
        assert "name" not in server.last_body

    def test_create_record_api_error(self):
        client, _ = make_client(
            {"status": "ERROR", "message": "Create error: duplicate record."}
        )

        with pytest.raises(ApiError) as exc_info:
            client.create_record("example.com", RecordType.A, "1.2.3.4")
        assert exc_info.value.message == "Create error: duplicate record."


class TestEditRecord:
    def test_edit_ipv4_address(self):
        client, server = make_client({"status": "SUCCESS"})

        client.edit_ipv4_address("example.com", "www", IPv4Address("9.9.9.9"))

        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/editByNameType/example.com/A/www"
        )
        assert server.last_body == {
            "secretapikey": "sk",
            "apikey": "ak",
            "type": "A",
            "content": "9.9.9.9",
        }

    def test_edit_ipv6_address_targets_aaaa(self):
        client, server = make_client({"status": "SUCCESS"})

        client.edit_ipv6_address("example.com", None, IPv6Address("2001:db8::2"))

        assert server.last_url == (
            "https://api.porkbun.com/api/json/v3/dns/editByNameType/example.com/AAAA/"
        )
        assert server.last_body["type"] == "AAAA"
        assert server.last_body["content"] == "2001:db8::2"

    def test_edit_rejects_wrong_family(self):
        client, server = make_client()

        with pytest.raises(UnexpectedAddressFamilyError):
            client.edit_ipv4_address("example.com", None, IPv6Address("::1"))
        with pytest.raises(UnexpectedAddressFamilyError):
            client.edit_ipv6_address("example.com", None, IPv4Address("1.2.3.4"))
        assert server.requests == []

    def test_edit_missing_record(self):
        client, _ = make_client(
            {"status": "ERROR", "message": "Edit error: We could not find the record."}
        )

        with pytest.raises(ApiError):
            client.edit_by_name_type("example.com", RecordType.A, "1.2.3.4")


def test_context_manager_closes_client():
    client, _ = make_client()
    with client as entered:
        assert entered is client
    assert client._client.is_closed

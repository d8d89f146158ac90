"""Tests for the Cloudflare DNS provider."""

import json

import httpx
import pytest

from shop_deployer.lib.dns.base import DnsProviderError, DnsRecordRequest
from shop_deployer.lib.dns.cloudflare import CloudflareDnsProvider

REQUEST = DnsRecordRequest(
    gateway_host="ipfs-prod.ogn.app",
    zone="example.com",
    subdomain="myshop",
    content_hash="QmHash",
)
API = "/client/v4"


def _ok(result: object) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "errors": [], "result": result})


class FakeCloudflare:
    """In-memory Cloudflare API keyed by (type, name)."""

    def __init__(self, existing: dict[tuple[str, str], str] | None = None) -> None:
        self.existing = existing or {}
        self.writes: list[tuple[str, str, dict]] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == f"{API}/zones":
            return _ok([{"id": "zone-1", "name": request.url.params["name"]}])
        if request.method == "GET" and path == f"{API}/zones/zone-1/dns_records":
            key = (request.url.params["type"], request.url.params["name"])
            return _ok([{"id": self.existing[key]}] if key in self.existing else [])
        if request.method in ("POST", "PUT"):
            self.writes.append((request.method, path, json.loads(request.content)))
            return _ok({"id": "new"})
        return httpx.Response(404, json={"success": False, "errors": [{"message": "not found"}]})


class TestCloudflareDnsProvider:
    """Tests for CloudflareDnsProvider."""

    def test_provider_name(self) -> None:
        assert CloudflareDnsProvider("ops@example.com", "key").provider_name == "cloudflare"

    @pytest.mark.asyncio
    async def test_creates_cname_and_dnslink(self, mock_http) -> None:
        api = FakeCloudflare()
        mock_http(api)

        await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)

        assert api.writes == [
            (
                "POST",
                f"{API}/zones/zone-1/dns_records",
                {"type": "CNAME", "name": "myshop.example.com", "content": "ipfs-prod.ogn.app", "ttl": 1},
            ),
            (
                "POST",
                f"{API}/zones/zone-1/dns_records",
                {"type": "TXT", "name": "_dnslink.myshop.example.com", "content": "dnslink=/ipfs/QmHash", "ttl": 1},
            ),
        ]
        assert api.requests[0].headers["X-Auth-Email"] == "ops@example.com"
        assert api.requests[0].headers["X-Auth-Key"] == "key"

    @pytest.mark.asyncio
    async def test_updates_existing_records(self, mock_http) -> None:
        api = FakeCloudflare(existing={("TXT", "_dnslink.myshop.example.com"): "txt-9"})
        mock_http(api)

        await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)

        methods = [(method, path) for method, path, _ in api.writes]
        assert methods == [
            ("POST", f"{API}/zones/zone-1/dns_records"),
            ("PUT", f"{API}/zones/zone-1/dns_records/txt-9"),
        ]

    @pytest.mark.asyncio
    async def test_unknown_zone(self, mock_http) -> None:
        mock_http(lambda request: _ok([]))
        with pytest.raises(DnsProviderError, match="Zone 'example.com' not found"):
            await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)

    @pytest.mark.asyncio
    async def test_api_reports_failure(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(200, json={"success": False, "errors": [{"message": "bad auth"}]}))
        with pytest.raises(DnsProviderError, match="bad auth"):
            await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1, 2], "ok", None])
    async def test_non_object_body(self, mock_http, body) -> None:
        mock_http(lambda request: httpx.Response(200, json=body))
        with pytest.raises(DnsProviderError, match="non-object body") as exc_info:
            await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)
        assert exc_info.value.provider_name == "cloudflare"

    @pytest.mark.asyncio
    async def test_http_error(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(403, json={"success": False, "errors": []}))
        with pytest.raises(DnsProviderError, match="HTTP 403") as exc_info:
            await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)
        assert exc_info.value.status_code == 403
        assert exc_info.value.provider_name == "cloudflare"

    @pytest.mark.asyncio
    async def test_timeout(self, mock_http) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        mock_http(handler)
        with pytest.raises(DnsProviderError, match="timed out"):
            await CloudflareDnsProvider("ops@example.com", "key").set_records(REQUEST)

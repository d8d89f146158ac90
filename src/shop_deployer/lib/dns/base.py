"""Abstract DNS provider interface for pointing shop subdomains at IPFS content.

A shop subdomain resolves through DNSLink: ``{subdomain}.{zone}`` is a CNAME
to a gateway host, and ``_dnslink.{subdomain}.{zone}`` carries a TXT record
``dnslink=/ipfs/{hash}`` telling the gateway which content to serve.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class DnsProviderError(Exception):
    """Raised when a DNS provider experiences a transport or service error.

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


@dataclass(frozen=True)
class DnsRecordRequest:
    """What a provider must set for one shop."""

    gateway_host: str
    zone: str
    subdomain: str
    content_hash: str

    @property
    def hostname(self) -> str:
        return f"{self.subdomain}.{self.zone}"

    @property
    def dnslink_hostname(self) -> str:
        return f"_dnslink.{self.hostname}"

    @property
    def dnslink_value(self) -> str:
        return f"dnslink=/ipfs/{self.content_hash}"


@dataclass(frozen=True)
class DnsRecord:
    """A single desired record."""

    record_type: str
    name: str
    content: str


def desired_records(request: DnsRecordRequest) -> list[DnsRecord]:
    """The CNAME and DNSLink TXT records for a request, in write order."""
    return [
        DnsRecord("CNAME", request.hostname, request.gateway_host),
        DnsRecord("TXT", request.dnslink_hostname, request.dnslink_value),
    ]


class BaseDnsProvider(ABC):
    """Abstract DNS provider. All providers must implement this."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider."""

    @abstractmethod
    async def set_records(self, request: DnsRecordRequest) -> None:
        """Create or update the shop's CNAME and DNSLink records.

        Raises:
            DnsProviderError: On transport or service errors.
        """

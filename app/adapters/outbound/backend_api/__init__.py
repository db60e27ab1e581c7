"""TreadX REST backend adapters."""

from app.adapters.outbound.backend_api.client import BackendClient
from app.adapters.outbound.backend_api.http_identity_provider import HttpIdentityProvider
from app.adapters.outbound.backend_api.http_lead_gateway import HttpLeadGateway
from app.adapters.outbound.backend_api.http_vendor_gateway import HttpVendorGateway

__all__ = [
    "BackendClient",
    "HttpIdentityProvider",
    "HttpLeadGateway",
    "HttpVendorGateway",
]

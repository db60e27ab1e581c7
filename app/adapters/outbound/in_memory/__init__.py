"""In-memory stand-ins for the TreadX backend."""

from app.adapters.outbound.in_memory.backend_store import InMemoryBackendStore
from app.adapters.outbound.in_memory.in_memory_lead_gateway import InMemoryLeadGateway
from app.adapters.outbound.in_memory.in_memory_vendor_gateway import InMemoryVendorGateway
from app.adapters.outbound.in_memory.static_identity_provider import StaticIdentityProvider

__all__ = [
    "InMemoryBackendStore",
    "InMemoryLeadGateway",
    "InMemoryVendorGateway",
    "StaticIdentityProvider",
]

"""Protocolos e contratos do core da aplicação."""

from .calendar_provider import CalendarProviderProtocol
from .credential_store import CredentialStoreProtocol, TokenIssuerProtocol
from .normalizer import EventNormalizerProtocol

__all__ = [
    "CalendarProviderProtocol",
    "CredentialStoreProtocol",
    "EventNormalizerProtocol",
    "TokenIssuerProtocol",
]

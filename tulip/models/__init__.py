"""Data models for Tulip."""

from .identity import PublicId, PrivateId
from .network import (
    PublicEndpoint,
    PrivateEndpoint,
    UserEndpoint,
    Network,
    Phonebook,
    PhonebookAdapter,
)

__all__ = [
    "PublicId",
    "PrivateId",
    "PublicEndpoint",
    "PrivateEndpoint",
    "UserEndpoint",
    "Network",
    "Phonebook",
    "PhonebookAdapter",
]

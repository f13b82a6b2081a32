"""Credential storage interface (port).

Implemented by the infrastructure layer; the application layer only sees this.
"""
from abc import ABC, abstractmethod
from typing import Optional
from repo_manager.domain.models import Credentials


class ICredentialStore(ABC):
    """Abstract interface for persisting the signed-in identity."""

    @abstractmethod
    def load(self) -> Optional[Credentials]:
        """Return the stored credentials, or None when nothing complete is stored."""
        pass

    @abstractmethod
    def save(self, credentials: Credentials) -> None:
        """Persist credentials, replacing any previously stored ones."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove stored credentials."""
        pass

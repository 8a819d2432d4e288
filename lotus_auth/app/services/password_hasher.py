from abc import ABC, abstractmethod


class VerificationError(Exception):
    """Stored digest could not be parsed. Callers treat it exactly like a mismatch."""


class PasswordHasher(ABC):
    """One-way adaptive hash for stored secrets - application layer"""

    @abstractmethod
    async def hash(self, secret: str) -> str:
        """Hash a secret with a fresh random salt embedded in the digest"""
        pass

    @abstractmethod
    async def verify(self, secret: str, digest: str) -> bool:
        """Check a secret against a digest. Never raises on a malformed digest."""
        pass

    @abstractmethod
    async def dummy_verify(self, secret: str) -> None:
        """Spend the same work as verify() when there is no digest to check against"""
        pass

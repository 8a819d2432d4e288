import asyncio
import logging

import bcrypt

from lotus_auth.app.services.password_hasher import PasswordHasher, VerificationError

logger = logging.getLogger(__name__)

# bcrypt rejects cost factors outside this range
MIN_COST_FACTOR = 4
MAX_COST_FACTOR = 31


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt implementation of PasswordHasher. Work runs in a worker thread."""

    def __init__(self, cost_factor: int = 12):
        if not MIN_COST_FACTOR <= cost_factor <= MAX_COST_FACTOR:
            raise ValueError(
                f"bcrypt cost factor must be between {MIN_COST_FACTOR} and {MAX_COST_FACTOR}"
            )
        self.cost_factor = cost_factor
        self._dummy_digest = None

    def _hash(self, secret: str) -> str:
        return bcrypt.hashpw(secret.encode(), bcrypt.gensalt(self.cost_factor)).decode()

    def _check(self, secret: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(secret.encode(), digest.encode())
        except (ValueError, TypeError, AttributeError) as exc:
            raise VerificationError("Malformed password digest") from exc

    async def hash(self, secret: str) -> str:
        return await asyncio.to_thread(self._hash, secret)

    async def verify(self, secret: str, digest: str) -> bool:
        try:
            return await asyncio.to_thread(self._check, secret, digest)
        except VerificationError:
            logger.warning("Stored password digest is malformed; treating as mismatch")
            return False

    async def dummy_verify(self, secret: str) -> None:
        if self._dummy_digest is None:
            self._dummy_digest = await self.hash("dummy_password")
        await self.verify(secret, self._dummy_digest)

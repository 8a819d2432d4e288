import pytest

from lotus_auth.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(cost_factor=4)


@pytest.mark.asyncio
async def test_hash_and_verify(hasher):
    digest = await hasher.hash("Secret123!")

    assert digest.startswith("$2b$04$")
    assert await hasher.verify("Secret123!", digest)
    assert not await hasher.verify("Secret123?", digest)


@pytest.mark.asyncio
async def test_hash_is_salted(hasher):
    assert await hasher.hash("Secret123!") != await hasher.hash("Secret123!")


@pytest.mark.asyncio
async def test_malformed_digest_is_a_mismatch(hasher):
    assert not await hasher.verify("Secret123!", "not-a-bcrypt-digest")


@pytest.mark.asyncio
async def test_dummy_verify_completes(hasher):
    await hasher.dummy_verify("anything")
    await hasher.dummy_verify("anything else")


def test_cost_factor_bounds():
    with pytest.raises(ValueError):
        BcryptPasswordHasher(cost_factor=3)
    with pytest.raises(ValueError):
        BcryptPasswordHasher(cost_factor=32)

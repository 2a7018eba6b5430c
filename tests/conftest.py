"""Shared fixtures for csr-keys tests."""

import pytest

from csr_keys.core.crypto import KeyHandle, generate_rsa_key
from csr_keys.core.errors import KeyGenerationError


class CountingGenerator:
    """Key generator that counts calls and can fail a number of times."""

    def __init__(self, key=None, failures: int = 0):
        self.key = key
        self.failures = failures
        self.calls = 0
        self.requested_sizes: list[int] = []

    def __call__(self, key_size: int):
        self.calls += 1
        self.requested_sizes.append(key_size)
        if self.calls <= self.failures:
            raise KeyGenerationError("entropy source failed")
        if self.key is not None:
            return self.key
        return generate_rsa_key(key_size)


@pytest.fixture(scope="session")
def rsa_key():
    """A 2048 bit RSA key shared across tests."""
    return generate_rsa_key(2048)


@pytest.fixture
def key_handle(rsa_key):
    return KeyHandle(rsa_key)


@pytest.fixture
def counting_generator(rsa_key):
    return CountingGenerator(key=rsa_key)


@pytest.fixture
def make_generator(rsa_key):
    """Factory for counting generators that hand out the shared key."""

    def factory(key=None, failures: int = 0) -> CountingGenerator:
        return CountingGenerator(key=key or rsa_key, failures=failures)

    return factory

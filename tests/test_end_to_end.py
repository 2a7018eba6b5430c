"""End-to-end test for csr-keys."""

import logging

import pytest

from csr_keys import (
    KeyCodec,
    KeyMaterial,
    RsaCsrPlugin,
    RsaOptions,
    SoftwareProvider,
)
from csr_keys.core.errors import KeyNotConvertibleError, NotInitializedError


def test_renewal_flow_reuses_cached_key(make_generator):
    """Test a second run with the persisted blob reuses the same key."""

    # 1. First issuance: no cache, key is generated
    first_generator = make_generator()
    first_run = RsaCsrPlugin(
        key_material=KeyMaterial(key_generator=first_generator)
    )
    first_csr = first_run.generate_csr("CN=mail.example.com")
    persisted = first_run.cache_data

    # 2. Renewal: persisted blob is handed back
    second_generator = make_generator()
    second_run = RsaCsrPlugin(
        key_material=KeyMaterial(cache_blob=persisted, key_generator=second_generator)
    )
    second_csr = second_run.generate_csr("CN=mail.example.com")

    assert first_generator.calls == 1
    assert second_generator.calls == 0
    assert (
        first_csr.public_key().public_numbers()
        == second_csr.public_key().public_numbers()
    )
    assert second_run.cache_data == persisted


def test_private_key_requires_provisioning():
    """Test the private key is unavailable before a CSR is generated."""
    plugin = RsaCsrPlugin()

    with pytest.raises(NotInitializedError):
        plugin.get_private_key()


def test_private_key_after_csr(make_generator):
    """Test the private key matches the CSR public key."""
    plugin = RsaCsrPlugin(key_material=KeyMaterial(key_generator=make_generator()))
    csr = plugin.generate_csr("CN=mail.example.com", dns_names=["mail.example.com"])

    private_key = plugin.get_private_key()

    assert private_key.public_key().public_numbers() == csr.public_key().public_numbers()
    assert csr.dns_names() == ["mail.example.com"]


def test_plugin_accepts_options_and_cache_data(key_handle):
    """Test the plugin builds its own key material from options and cache."""
    blob = KeyCodec().encode(key_handle)

    plugin = RsaCsrPlugin(options=RsaOptions(min_key_bits=4096), cache_data=blob)
    plugin.generate_csr("CN=example.com")

    assert plugin.key_material.key_bits == 4096
    assert plugin.cache_data == blob
    assert plugin.can_convert() is True


def test_conversion_failure_invalidates_for_next_run(make_generator, caplog):
    """Test a rejected conversion is logged, raised and drives invalidation."""
    generator = make_generator()
    material = KeyMaterial(key_generator=generator)
    plugin = RsaCsrPlugin(
        key_material=material, provider=SoftwareProvider(max_key_size=1024)
    )
    plugin.generate_csr("CN=mail.example.com")
    before = material.get_private_key_parameters()

    with caplog.at_level(logging.WARNING):
        with pytest.raises(KeyNotConvertibleError):
            plugin.convert()

    assert "might not be usable" in caplog.text
    assert material.get_private_key_parameters() == before

    # Caller reacts by invalidating; next access regenerates
    material.invalidate()
    with pytest.raises(NotInitializedError):
        plugin.cache_data
    plugin.generate_csr("CN=mail.example.com")
    assert generator.calls == 2


def test_conversion_success(make_generator):
    """Test converting the provisioned key."""
    plugin = RsaCsrPlugin(key_material=KeyMaterial(key_generator=make_generator()))

    converted = plugin.convert()

    assert converted.key_size == 2048
    assert converted.provider == "software"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

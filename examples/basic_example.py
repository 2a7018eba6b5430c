#!/usr/bin/env python3
"""
Basic example demonstrating the csr-keys renewal workflow:
1. First run generates a key and a CSR, and persists the cache blob
2. Renewal run reuses the persisted key
3. A corrupted cache is recovered by regeneration
4. The key is converted for a mandated provider
"""

import logging
from pathlib import Path
import tempfile

from csr_keys import RsaCsrPlugin, RsaOptions, SoftwareProvider
from csr_keys.core.errors import ProviderConversionError


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("=== csr-keys - Basic Example ===\n")

    cache_file = Path(tempfile.gettempdir()) / "csr-keys-example.cache"

    # ============================================================================
    # STEP 1: First issuance generates a key
    # ============================================================================
    print("1. First issuance...")
    plugin = RsaCsrPlugin(options=RsaOptions(min_key_bits=2048))
    csr = plugin.generate_csr("CN=mail.example.com", dns_names=["mail.example.com"])
    cache_file.write_bytes(plugin.cache_data)
    print(f"   ✓ CSR for {csr.subject.rfc4514_string()}")
    print(f"   - Key size: {csr.public_key().key_size}")
    print(f"   - Cache written to {cache_file}\n")

    # ============================================================================
    # STEP 2: Renewal reuses the cached key
    # ============================================================================
    print("2. Renewal with cached key...")
    renewal = RsaCsrPlugin(cache_data=cache_file.read_bytes())
    renewed_csr = renewal.generate_csr("CN=mail.example.com")
    same_key = (
        renewed_csr.public_key().public_numbers() == csr.public_key().public_numbers()
    )
    print(f"   ✓ Same key reused: {same_key}\n")

    # ============================================================================
    # STEP 3: Corrupted cache is regenerated
    # ============================================================================
    print("3. Renewal with corrupted cache...")
    recovered = RsaCsrPlugin(cache_data=b"corrupted")
    recovered.generate_csr("CN=mail.example.com")
    cache_file.write_bytes(recovered.cache_data)
    print(f"   ✓ New key generated, state: {recovered.key_material.state.value}\n")

    # ============================================================================
    # STEP 4: Convert for a mandated provider
    # ============================================================================
    print("4. Converting key for mail server provider...")
    exporter = RsaCsrPlugin(
        cache_data=cache_file.read_bytes(), provider=SoftwareProvider()
    )
    try:
        converted = exporter.convert()
        print(f"   ✓ Converted into container {converted.container_name}\n")
    except ProviderConversionError as e:
        # Drop the cache so the next run starts from a fresh key
        cache_file.unlink(missing_ok=True)
        print(f"   ✗ Conversion failed ({e}), cache invalidated\n")

    print("=== Example Complete ===")


if __name__ == "__main__":
    main()

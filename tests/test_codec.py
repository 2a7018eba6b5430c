"""Tests for the cache blob codec."""

import base64
import json
import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from csr_keys.core.codec import KeyCodec
from csr_keys.core.errors import DecodeError
from csr_keys.core.models import KeyPairRecord


def test_encode_decode_preserves_key(key_handle):
    """Test that a decoded blob holds the same key pair."""
    codec = KeyCodec()

    decoded = codec.decode(codec.encode(key_handle))

    assert decoded.key_size == key_handle.key_size
    assert decoded.public_numbers() == key_handle.public_numbers()
    assert decoded.private_numbers().d == key_handle.private_numbers().d


def test_encoded_blob_is_rsa_record(key_handle):
    """Test the blob carries algorithm and key size metadata."""
    blob = KeyCodec().encode(key_handle)

    record = KeyPairRecord.from_blob(blob)
    assert record.algorithm == "RSA"
    assert record.key_size == 2048
    assert record.version == "1.0"


@pytest.mark.parametrize(
    "blob",
    [
        b"",
        b"{}",
        b"not json at all",
        b"\xff\xfe\x00\x01",
        b'{"version": "1.0", "algorithm": "RSA", "key_size": 2048, "key": "!!!"}',
    ],
)
def test_decode_rejects_malformed_blobs(blob):
    """Test malformed blobs raise DecodeError."""
    with pytest.raises(DecodeError):
        KeyCodec().decode(blob)


def test_decode_rejects_random_bytes():
    """Test random bytes raise DecodeError."""
    with pytest.raises(DecodeError):
        KeyCodec().decode(os.urandom(256))


def test_decode_rejects_truncated_blob(key_handle):
    """Test a truncated blob raises DecodeError."""
    blob = KeyCodec().encode(key_handle)

    with pytest.raises(DecodeError):
        KeyCodec().decode(blob[: len(blob) // 2])


def test_decode_rejects_truncated_key(key_handle):
    """Test a well-formed record with truncated key bytes raises DecodeError."""
    record = KeyPairRecord.from_blob(KeyCodec().encode(key_handle))
    record.key = record.key[:100]

    with pytest.raises(DecodeError):
        KeyCodec().decode(record.to_blob())


def test_decode_rejects_wrong_algorithm_label(key_handle):
    """Test a record labelled with another algorithm raises DecodeError."""
    data = json.loads(KeyCodec().encode(key_handle))
    data["algorithm"] = "EC"

    with pytest.raises(DecodeError, match="algorithm"):
        KeyCodec().decode(json.dumps(data).encode("utf-8"))


def test_decode_rejects_non_rsa_key():
    """Test an EC key inside an RSA record raises DecodeError."""
    ec_key = ec.generate_private_key(ec.SECP256R1())
    der = ec_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    blob = json.dumps(
        {
            "version": "1.0",
            "algorithm": "RSA",
            "key_size": 256,
            "key": base64.b64encode(der).decode("utf-8"),
        }
    ).encode("utf-8")

    with pytest.raises(DecodeError, match="RSA"):
        KeyCodec().decode(blob)


def test_decode_rejects_key_size_mismatch(key_handle):
    """Test a record whose key size disagrees with the key raises DecodeError."""
    data = json.loads(KeyCodec().encode(key_handle))
    data["key_size"] = 4096

    with pytest.raises(DecodeError, match="mismatch"):
        KeyCodec().decode(json.dumps(data).encode("utf-8"))


def test_decode_rejects_unknown_version(key_handle):
    """Test an unknown record version raises DecodeError."""
    data = json.loads(KeyCodec().encode(key_handle))
    data["version"] = "9.9"

    with pytest.raises(DecodeError):
        KeyCodec().decode(json.dumps(data).encode("utf-8"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

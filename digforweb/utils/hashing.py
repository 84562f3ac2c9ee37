"""
Hashing utilities for evidence integrity values.
"""
import hashlib
import secrets


def calculate_data_hash(data):
    """
    SHA-256 of data in memory.

    Args:
        data: Bytes or str to hash

    Returns:
        str: hex digest
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def generate_integrity_hash(*parts):
    """
    Generate an integrity hash for an evidence record.

    Hashes the given descriptive parts (type, storage location...) together
    with a random nonce, so two items with the same description still get
    distinct values.
    """
    material = '|'.join(str(p) for p in parts if p) + '|' + secrets.token_hex(16)
    return calculate_data_hash(material)


def is_hex_digest(value, length=None):
    """True if ``value`` is a hexadecimal string (of ``length`` chars, if given)."""
    if not value:
        return False
    if length is not None and len(value) != length:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return True

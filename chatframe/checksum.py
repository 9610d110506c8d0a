"""Time-salted checksum token derived from a secret."""

import base64
import hashlib
import time

from .constants import CHECKSUM_TIME_UNIT_MS, CHECKSUM_TIMESTAMP_BYTES, OBFUSCATION_SEED


def hashed_hex(value: str, salt: str = "") -> str:
    """Return the lowercase hex SHA-256 digest of ``value + salt``."""
    return hashlib.sha256((value + salt).encode("utf-8")).hexdigest()


def obfuscate_bytes(data: bytearray) -> bytearray:
    """Obfuscate ``data`` in place with a running XOR-then-add transform.

    Each byte is XORed with the previous output byte (the seed for the first
    one) and offset by its index, modulo 256.

    Args:
        data: Bytes to transform; modified in place

    Returns:
        The same ``data`` object
    """
    carry = OBFUSCATION_SEED
    for r in range(len(data)):
        data[r] = ((data[r] ^ carry) + (r % 256)) % 256
        carry = data[r]
    return data


def timestamp_bytes(timestamp: int) -> bytes:
    """Serialize ``timestamp`` into 6 bytes, most significant first.

    This is the full 48-bit big-endian value. The JavaScript client this
    token comes from shifts with 32-bit ``>>``, so its first two bytes repeat
    the low-order bytes instead; check here first when a service rejects the
    checksum prefix.
    """
    shifts = range(8 * (CHECKSUM_TIMESTAMP_BYTES - 1), -1, -8)
    return bytes((timestamp >> shift) & 0xFF for shift in shifts)


def generate_checksum(secret: str, timestamp_ms: int | None = None) -> str:
    """Build the checksum token for ``secret``.

    Args:
        secret: Secret the machine identifiers are derived from
        timestamp_ms: Unix time in milliseconds (defaults to now)

    Returns:
        ``<base64 of 6 obfuscated bytes><machineId hex>/<macMachineId hex>``
    """
    machine_id = hashed_hex(secret, "machineId")
    mac_machine_id = hashed_hex(secret, "macMachineId")

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    timestamp = timestamp_ms // CHECKSUM_TIME_UNIT_MS

    obfuscated = obfuscate_bytes(bytearray(timestamp_bytes(timestamp)))
    encoded = base64.b64encode(obfuscated).decode("ascii")

    return f"{encoded}{machine_id}/{mac_machine_id}"

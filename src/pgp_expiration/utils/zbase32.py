"""
z-base-32 encoding utilities.

Used to build Web Key Directory hashes (RFC 6189 alphabet, no padding).
"""

import hashlib

ZBASE32_ALPHABET = "ybndrfg8ejkmcpqxot1uwisza345h769"


def zbase32_encode(data: bytes) -> str:
    """
    Encodes bytes with the z-base-32 alphabet.

    Bits are consumed five at a time, most significant first; the last
    group is padded with zero bits.

    Args:
        data: Bytes to encode

    Returns:
        Encoded string (no padding characters)
    """
    value = int.from_bytes(data, "big")
    bit_count = len(data) * 8

    padding = -bit_count % 5
    value <<= padding
    bit_count += padding

    return "".join(
        ZBASE32_ALPHABET[(value >> shift) & 0x1F]
        for shift in range(bit_count - 5, -1, -5)
    )


def wkd_hash(local_part: str) -> str:
    """
    Computes the WKD hash of an address local part.

    Args:
        local_part: Part of the address before the "@"

    Returns:
        z-base-32 encoded SHA-1 of the lowercased local part (32 characters)
    """
    digest = hashlib.sha1(local_part.lower().encode("utf-8")).digest()  # noqa: S324
    return zbase32_encode(digest)

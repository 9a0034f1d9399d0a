"""CRC16-CCITT implementation."""
from __future__ import annotations

CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF
CRC_HEADER = "6304"


def crc16_ccitt(data: bytes) -> int:
    """Compute CRC-16/CCITT-FALSE (init 0xFFFF, poly 0x1021) bit by bit, MSB first."""

    checksum = CRC16_INIT
    for byte in data:
        for i in range(8):
            bit = (byte >> (7 - i)) & 1
            c15 = (checksum >> 15) & 1
            checksum = (checksum << 1) & 0xFFFF
            if c15 != bit:
                checksum ^= CRC16_POLY
    return checksum & 0xFFFF


def crc16_hex(data: str) -> str:
    """CRC of the UTF-8 encoding of ``data`` as 4 uppercase hex digits."""

    return f"{crc16_ccitt(data.encode('utf-8')):04X}"


def verify_crc(payload: str) -> bool:
    """Check the trailing Tag 63 checksum of an EMV payload string."""

    if len(payload) < 8 or payload[-8:-4] != CRC_HEADER:
        return False
    return crc16_hex(payload[:-4]) == payload[-4:].upper()

"""VietQR (NAPAS) payload encoder."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Callable, Final

from .crc import CRC_HEADER, crc16_hex
from .tlv import build_field

PAYLOAD_FORMAT_VERSION: Final = "01"
INIT_METHOD_ONE_TIME: Final = "11"
INIT_METHOD_REUSABLE: Final = "12"
NAPAS_GUID: Final = "A000000727"
SERVICE_CODE: Final = "QRIBFTTA"
CATEGORY_CODE: Final = "7070"
CURRENCY_VND: Final = "704"
COUNTRY_CODE: Final = "VN"
MERCHANT_NAME_PLACEHOLDER: Final = "NA"

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class GeneratorInput:
    bank_bin: str
    account_number: str
    amount: str | None = None
    message: str | None = None
    is_one_time: bool = False


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str
    init_method: str


def parse_number(text: str | None) -> float | None:
    """Parse a plain decimal literal; whitespace, separators and words yield ``None``."""

    if not text or _NUMBER_RE.fullmatch(text) is None:
        return None
    return float(text)


def _positive_integer(amount: str | None) -> bool:
    return bool(amount) and _INTEGER_RE.fullmatch(amount) is not None and int(amount) > 0


def _positive_number(amount: str | None) -> bool:
    value = parse_number(amount)
    return value is not None and value > 0


def remove_accent(text: str) -> str:
    """Fold Vietnamese diacritics to plain ASCII letters (``đ`` has no decomposition)."""

    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    folded = unicodedata.normalize("NFC", stripped)
    return folded.replace("đ", "d").replace("Đ", "D")


def normalize_message(message: str) -> str:
    return remove_accent(message).upper()


def _init_method(data: GeneratorInput) -> str:
    if data.is_one_time or _positive_integer(data.amount):
        return INIT_METHOD_ONE_TIME
    return INIT_METHOD_REUSABLE


def _merchant_account_info(data: GeneratorInput) -> str:
    beneficiary = build_field("00", data.bank_bin) + build_field("01", data.account_number)
    return build_field("00", NAPAS_GUID) + build_field("01", beneficiary) + build_field("02", SERVICE_CODE)


def _amount(data: GeneratorInput) -> str:
    return data.amount if _positive_number(data.amount) else ""


def _additional_data(data: GeneratorInput) -> str:
    if not data.message:
        return ""
    return build_field("02", SERVICE_CODE) + build_field("08", normalize_message(data.message))


# Ordered (tag, value builder) steps; a builder returning "" omits its field.
FIELD_PIPELINE: Final[tuple[tuple[str, Callable[[GeneratorInput], str]], ...]] = (
    ("00", lambda _: PAYLOAD_FORMAT_VERSION),
    ("01", _init_method),
    ("38", _merchant_account_info),
    ("52", lambda _: CATEGORY_CODE),
    ("53", lambda _: CURRENCY_VND),
    ("54", _amount),
    ("58", lambda _: COUNTRY_CODE),
    ("59", lambda _: MERCHANT_NAME_PLACEHOLDER),
    ("62", _additional_data),
)


def encode_payload(data: GeneratorInput) -> EncodedPayload:
    """Compose all fields in order and append the Tag 63 CRC16-CCITT."""

    body = "".join(build_field(tag, builder(data)) for tag, builder in FIELD_PIPELINE)
    crc_input = f"{body}{CRC_HEADER}"
    crc = crc16_hex(crc_input)
    return EncodedPayload(payload=f"{crc_input}{crc}", crc=crc, init_method=_init_method(data))


def generate(
    bank_bin: str,
    account_number: str,
    amount: str | None = None,
    message: str | None = None,
    is_one_time: bool = False,
) -> str:
    """Build a VietQR payload string for a bank account."""

    data = GeneratorInput(
        bank_bin=bank_bin,
        account_number=account_number,
        amount=amount,
        message=message,
        is_one_time=is_one_time,
    )
    return encode_payload(data).payload

"""Payment flow services built on decoded VietQR payloads."""
from __future__ import annotations

import logging
from urllib.parse import unquote, urlsplit

from ..config import settings
from ..models import AMOUNT_TAG, CURRENCY_TAG, MANUAL_ENTRY_SOURCE, ParsedTransaction, PaymentFlow
from ..tlv import decode_tlv, get_tag_value
from ..vietqr_encoder import parse_number
from .errors import err_bad_payload, err_invalid_amount, err_payload_missing

logger = logging.getLogger("vietqr.payment")

ISO_NUMERIC_CURRENCIES = {"704": "VND"}


def extract_payload(url: str, param: str = "data") -> str | None:
    """Return the payload carried in a deep link query, e.g. ``napasapp:///qr-nfc?data=...``.

    Values are percent-decoded; ``+`` is kept as is since payloads are not form encoded.
    """

    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.query:
        return None
    for pair in parts.query.split("&"):
        name, sep, value = pair.partition("=")
        if unquote(name) == param:
            return unquote(value) if sep else None
    return None


def parse_amount(amount: str) -> float | None:
    """Convert display amounts such as ``2.000.000`` to numbers (``.`` is a thousands separator)."""

    return parse_number(amount.replace(".", ""))


class PaymentService:
    def __init__(
        self,
        *,
        amount_threshold: int | None = None,
        deep_link_param: str | None = None,
        default_currency: str | None = None,
    ):
        self.amount_threshold = amount_threshold or settings.amount_threshold
        self.deep_link_param = deep_link_param or settings.deep_link_param
        self.default_currency = default_currency or settings.default_currency

    def resolve(
        self,
        *,
        payload: str | None = None,
        url: str | None = None,
        currency: str | None = None,
    ) -> ParsedTransaction:
        """Parse either a raw payload or a deep link carrying one."""

        if (payload is None) == (url is None):
            raise err_bad_payload("Provide exactly one of payload or url")
        if url is not None:
            return self.parse_transaction(url, currency=currency)
        return self.parse_payload(payload, currency=currency)

    def parse_transaction(self, url: str, currency: str | None = None) -> ParsedTransaction:
        tlv_string = extract_payload(url, self.deep_link_param)
        if tlv_string is None:
            logger.warning("payload not found in link", extra={"param": self.deep_link_param})
            raise err_payload_missing(f"Query parameter '{self.deep_link_param}' not found in link")
        return self.parse_payload(tlv_string, full_url=url, currency=currency)

    def parse_payload(self, payload: str, *, full_url: str = "", currency: str | None = None) -> ParsedTransaction:
        tag_map = decode_tlv(payload)
        amount = get_tag_value(tag_map, AMOUNT_TAG) or ""
        if not amount:
            logger.info("transaction amount not found, manual entry required", extra={"tag": AMOUNT_TAG})

        return ParsedTransaction(
            amount=amount,
            currency=currency or self._currency_of(tag_map),
            full_url=full_url,
            original_data=payload,
            tlv_data=tag_map,
        )

    def manual_transaction(self, amount: str, currency: str | None = None) -> ParsedTransaction:
        return ParsedTransaction(
            amount=amount,
            currency=currency or self.default_currency,
            full_url=f"manual://transaction?amount={amount}",
            original_data=MANUAL_ENTRY_SOURCE,
            tlv_data={AMOUNT_TAG: amount},
        )

    def validate_transaction(self, transaction: ParsedTransaction) -> None:
        """Reject present but unusable amounts; a missing amount is valid (manual entry)."""

        if transaction.needs_manual_amount:
            return
        value = parse_amount(transaction.amount)
        if value is None:
            raise err_invalid_amount("Transaction amount is not a valid number")
        if value <= 0:
            raise err_invalid_amount("Transaction amount must be greater than zero")

    def determine_flow(self, amount: str) -> PaymentFlow:
        """Decide how much confirmation the amount needs; the threshold is inclusive."""

        if not amount:
            return PaymentFlow.ENTER_AMOUNT
        value = parse_amount(amount)
        if value is None:
            raise err_invalid_amount()
        if value < self.amount_threshold:
            return PaymentFlow.PROCEED
        return PaymentFlow.CONFIRM

    def _currency_of(self, tag_map: dict[str, str]) -> str:
        code = get_tag_value(tag_map, CURRENCY_TAG)
        return ISO_NUMERIC_CURRENCIES.get(code or "", self.default_currency)

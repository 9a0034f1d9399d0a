"""Domain models shared by the payment and generator services."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .tlv import TagMap

AMOUNT_TAG = "54"
CURRENCY_TAG = "53"
MANUAL_ENTRY_SOURCE = "manual_entry"


class PaymentFlow(str, enum.Enum):
    PROCEED = "PROCEED"
    CONFIRM = "CONFIRM"
    ENTER_AMOUNT = "ENTER_AMOUNT"


@dataclass(slots=True)
class ParsedTransaction:
    amount: str
    currency: str
    full_url: str
    original_data: str
    tlv_data: TagMap = field(default_factory=dict)

    @property
    def needs_manual_amount(self) -> bool:
        return not self.amount

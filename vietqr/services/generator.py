"""QR payload generation services."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import settings
from ..monitoring import record_generated
from ..renderer import render_qr_payload
from ..vietqr_encoder import EncodedPayload, GeneratorInput, encode_payload

logger = logging.getLogger("vietqr.generator")


@dataclass(slots=True)
class GenerateResult:
    encoded: EncodedPayload
    init_method: str
    qr_png_base64: str | None = None


class QRGenerator:
    def __init__(self, title: str | None = None):
        self.title = title or settings.app_name

    def create(
        self,
        *,
        bank_bin: str,
        account_number: str,
        amount: str | None = None,
        message: str | None = None,
        is_one_time: bool = False,
        render_image: bool = True,
    ) -> GenerateResult:
        encoded = encode_payload(
            GeneratorInput(
                bank_bin=bank_bin,
                account_number=account_number,
                amount=amount,
                message=message,
                is_one_time=is_one_time,
            )
        )
        init_method = encoded.init_method
        record_generated(init_method)
        logger.info(
            "payload generated",
            extra={"bank_bin": bank_bin, "init_method": init_method, "crc": encoded.crc},
        )

        qr_png_base64 = None
        if render_image:
            qr_png_base64 = render_qr_payload(encoded.payload, title=self.title)["png_base64"]

        return GenerateResult(encoded=encoded, init_method=init_method, qr_png_base64=qr_png_base64)

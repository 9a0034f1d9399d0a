"""QR image renderer for VietQR payloads."""
from __future__ import annotations

import base64
import io
from typing import Any

import qrcode
from PIL import Image, ImageDraw, ImageFont

LABEL_HEIGHT = 40
MARGIN = 40


def generate_qr_image(data: str, title: str = "VietQR") -> Image.Image:
    """Generate QR image framed with a text label under the code."""

    # Medium correction keeps long payloads (with Tag 62 message) at a scannable version.
    qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=4)
    qr.add_data(data)
    qr.make(fit=True)

    qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGBA")
    width, height = qr_img.size

    canvas_width = width + MARGIN * 2
    canvas_height = height + MARGIN * 2 + LABEL_HEIGHT

    canvas = Image.new("RGBA", (canvas_width, canvas_height), color="#FFFFFF")
    canvas.paste(qr_img, (MARGIN, MARGIN))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    text = title.upper()
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_x = (canvas_width - (right - left)) // 2
    text_y = MARGIN + height + (LABEL_HEIGHT - (bottom - top)) // 2
    draw.rectangle(
        [(MARGIN // 2, MARGIN + height), (canvas_width - MARGIN // 2, MARGIN + height + LABEL_HEIGHT)],
        fill="#E8F1FB",
    )
    draw.text((text_x, text_y), text, fill="#00427A", font=font)

    return canvas


def qr_image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_qr_payload(payload: str, title: str = "VietQR") -> dict[str, Any]:
    """Render payload into PNG bytes and base64 string."""

    image = generate_qr_image(payload, title=title)
    png_bytes = qr_image_to_png_bytes(image)
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
    }

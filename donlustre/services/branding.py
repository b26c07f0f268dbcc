"""Receipt branding: the business logo and a faint watermark derived from it."""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

_LOGO_MAX = (240, 240)
_WATERMARK_MAX = (900, 900)


@dataclass
class BrandingAssets:
    logo_b64: str = ""
    watermark_b64: str = ""


def make_watermark(data: bytes, opacity: float, max_size: tuple[int, int] = _WATERMARK_MAX) -> bytes:
    """Return PNG bytes of the image with every pixel's alpha scaled by ``opacity``."""
    img = Image.open(io.BytesIO(data)).convert("RGBA")
    img.thumbnail(max_size)
    opacity = max(0.0, min(1.0, opacity))
    alpha = img.getchannel("A").point(lambda a: int(a * opacity))
    img.putalpha(alpha)
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


def _logo_png(data: bytes) -> bytes:
    img = Image.open(io.BytesIO(data)).convert("RGBA")
    img.thumbnail(_LOGO_MAX)
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


def load_branding(logo_path: str, opacity: float) -> BrandingAssets:
    """Load the configured logo. A missing or unreadable logo yields empty assets."""
    if not logo_path:
        return BrandingAssets()
    path = Path(logo_path)
    if not path.is_file():
        logger.warning("Receipt logo not found at %s", logo_path)
        return BrandingAssets()
    try:
        raw = path.read_bytes()
        logo = _logo_png(raw)
        watermark = make_watermark(raw, opacity)
    except OSError:
        logger.exception("Could not read receipt logo %s", logo_path)
        return BrandingAssets()
    return BrandingAssets(
        logo_b64=base64.standard_b64encode(logo).decode("utf-8"),
        watermark_b64=base64.standard_b64encode(watermark).decode("utf-8"),
    )

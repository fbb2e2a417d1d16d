"""Image normalization — bound the photo's size before it goes over the wire."""
import base64
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from src.constants import (
    IMAGE_BACKGROUND,
    IMAGE_FORMAT,
    IMAGE_JPEG_QUALITY,
    IMAGE_MAX_DIMENSION,
    IMAGE_MEDIA_TYPE,
    MSG_IMAGE_FAILED,
    MSG_IMAGE_NORMALIZED,
)
from src.vision.errors import ImageProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    media_type: str
    width: int
    height: int

    def to_base64(self) -> str:
        return base64.standard_b64encode(self.data).decode()


def _to_rgb(img: Image.Image) -> Image.Image:
    """Flatten transparency onto white; JPEG has no alpha channel."""
    match img.mode:
        case "RGB":
            return img
        case "RGBA" | "LA" | "PA" | "P":
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, IMAGE_BACKGROUND)
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        case _:
            return img.convert("RGB")


def normalize_image(
    raw: bytes,
    max_dimension: int = IMAGE_MAX_DIMENSION,
    quality: int = IMAGE_JPEG_QUALITY,
) -> EncodedImage:
    """Shrink so the long edge is at most ``max_dimension`` and re-encode as JPEG.

    Images already within bounds keep their size. Raises ImageProcessingError
    when the bytes can't be decoded or the encoder produces nothing.
    """
    try:
        with Image.open(io.BytesIO(raw)) as src:
            img = ImageOps.exif_transpose(src)
            img = _to_rgb(img)
            img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
            output = io.BytesIO()
            img.save(output, format=IMAGE_FORMAT, quality=quality, optimize=True)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning(MSG_IMAGE_FAILED, exc)
        raise ImageProcessingError() from exc

    data = output.getvalue()
    match data:
        case b"":
            raise ImageProcessingError()
        case _:
            logger.debug(MSG_IMAGE_NORMALIZED, img.width, img.height, len(data))
            return EncodedImage(
                data=data,
                media_type=IMAGE_MEDIA_TYPE,
                width=img.width,
                height=img.height,
            )

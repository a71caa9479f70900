"""Image Translate Service — resize, OCR with Gemini vision, clean, translate.

Invariants:
    - Only image/* uploads up to max_file_size are accepted (400 / 413 otherwise)
    - Images are shrunk to fit max_side x max_side, never enlarged, re-encoded as JPEG q85
    - "No text found" (or an empty OCR answer) yields empty cleaned/translated text

Design Decisions:
    - Pillow work runs in a worker thread: decoding a 10 MB photo blocks for tens of ms
    - Clean step reuses TranslateTextService (Gemini with basic fallback)
"""

import asyncio
import io
import logging

from PIL import Image, UnidentifiedImageError

from app.core.errors import PayloadTooLargeError, ValidationError
from app.infrastructure.google_translate import GoogleTranslateClient
from app.services.text_processor import TextProcessor
from app.services.translate_text_service import TranslateTextService

logger = logging.getLogger(__name__)

NO_TEXT_MARKER = "No text found"
NO_TEXT_MESSAGE = "No text found in the image"
OCR_MAX_SIDE = 1200
JPEG_QUALITY = 85


def _resize_sync(data: bytes, max_side: int) -> bytes:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = img.convert("RGB")
            img.thumbnail((max_side, max_side))
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=JPEG_QUALITY)
            return out.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Invalid image file: {e}", field="image")


async def prepare_image(data: bytes, max_side: int = OCR_MAX_SIDE) -> bytes:
    """Downscale (never upscale) and re-encode as JPEG for OCR."""
    return await asyncio.to_thread(_resize_sync, data, max_side)


def is_empty_ocr(text: str) -> bool:
    return not text or text.strip().strip('"').startswith(NO_TEXT_MARKER)


class ImageTranslateService:

    def __init__(
        self,
        processor: TextProcessor,
        cleaner: TranslateTextService,
        translator: GoogleTranslateClient,
        max_file_size: int,
    ):
        self.processor = processor
        self.cleaner = cleaner
        self.translator = translator
        self.max_file_size = max_file_size

    async def translate_image(
        self,
        data: bytes,
        content_type: str | None,
        target_lang: str,
        source_lang: str = "en",
    ) -> dict:
        if not data:
            raise ValidationError("No image file uploaded", field="image")
        if not (content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed", field="image")
        if len(data) > self.max_file_size:
            raise PayloadTooLargeError(self.max_file_size)

        prepared = await prepare_image(data)
        extracted = await self.processor.extract_image_text(prepared, "image/jpeg")
        if is_empty_ocr(extracted):
            logger.info("OCR found no text in image", extra={"service": "gemini"})
            return {"extractedText": NO_TEXT_MESSAGE, "cleanedText": "", "translatedText": ""}

        cleaned = await self.cleaner.clean_with_gemini(extracted, source_lang)
        translated = await self.translator.translate(cleaned, target_lang)
        return {
            "extractedText": extracted,
            "cleanedText": cleaned,
            "translatedText": translated,
        }

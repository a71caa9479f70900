"""Document Translate Service — extract text per file (image/pdf/docx/txt), clean and translate.

Invariants:
    - At most max_documents files per request, each at most max_document_size bytes
    - Unsupported types extract to "" (no Gemini calls for them)
    - A failing file never fails the batch: its entry carries an `error` field
    - A cleaning failure keeps the extracted text and still translates it
    - Results keep upload order

Design Decisions:
    - Translation with Gemini (not gtx): documents keep paragraph structure better
    - Extraction libraries are blocking: run in worker threads
"""

import asyncio
import io
import logging
import zipfile
from dataclasses import dataclass

import docx
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.core.errors import (
    ErrorContext, PayloadTooLargeError, TranslatorError, ValidationError,
)
from app.core.language_codes import language_name
from app.infrastructure.gemini_client import ResilientGeminiClient
from app.services.image_translate_service import is_empty_ocr, prepare_image
from app.services.text_processor import OCR_PROMPT

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCUMENT_OCR_MAX_SIDE = 1600

DOCUMENT_CLEAN_PROMPT = """Clean and correct the following text, fixing OCR/transcription artifacts. Return only the cleaned text.

Text: "{text}"

Cleaned:"""

DOCUMENT_TRANSLATE_PROMPT = """Translate the following text from {source} to {target}. Return only the translated text without any additional commentary or formatting:

Text: "{text}"

Translation:"""

_EXTRACTION_ERRORS = (
    PdfReadError, PackageNotFoundError, zipfile.BadZipFile,
    KeyError, ValueError, OSError,
)


@dataclass
class UploadedDocument:
    filename: str
    content_type: str
    data: bytes


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages).strip()


def _docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs if p.text).strip()


def document_kind(doc: UploadedDocument) -> str | None:
    name = doc.filename.lower()
    mime = doc.content_type or ""
    if mime.startswith("image/"):
        return "image"
    if mime == "application/pdf":
        return "pdf"
    if mime == DOCX_MIME or name.endswith(".docx"):
        return "docx"
    if mime == "text/plain" or name.endswith(".txt"):
        return "txt"
    return None


class DocumentTranslateService:

    def __init__(
        self,
        gemini: ResilientGeminiClient,
        max_documents: int,
        max_document_size: int,
    ):
        self.gemini = gemini
        self.max_documents = max_documents
        self.max_document_size = max_document_size

    async def translate_documents(
        self,
        documents: list[UploadedDocument],
        target_lang: str = "es",
        source_lang: str = "en",
    ) -> dict:
        if not documents:
            raise ValidationError("No documents uploaded", field="documents")
        if len(documents) > self.max_documents:
            raise ValidationError(
                f"Too many documents (max {self.max_documents})", field="documents",
            )
        for doc in documents:
            if len(doc.data) > self.max_document_size:
                raise PayloadTooLargeError(self.max_document_size)

        source = language_name(source_lang)
        target = language_name(target_lang)
        results = []
        for doc in documents:
            results.append(await self._process(doc, source, target))
        return {"documents": results}

    async def _process(self, doc: UploadedDocument, source: str, target: str) -> dict:
        entry = {
            "filename": doc.filename,
            "extractedText": "",
            "cleanedText": "",
            "translatedText": "",
            "mimetype": doc.content_type,
        }
        try:
            extracted = await self.extract_text(doc)
        except (*_EXTRACTION_ERRORS, TranslatorError) as e:
            logger.warning(f"Extraction failed for {doc.filename}: {e}")
            entry["error"] = f"Extraction failed: {e}"
            return entry
        entry["extractedText"] = extracted
        entry["cleanedText"] = extracted
        if not extracted:
            return entry

        try:
            entry["cleanedText"] = await self.gemini.generate_text(
                DOCUMENT_CLEAN_PROMPT.format(text=extracted),
                context=ErrorContext(service="document-clean"),
            ) or extracted
        except TranslatorError as e:
            logger.warning(
                f"Cleaning failed for {doc.filename}, translating raw text: {e.message}",
                extra={"error_code": e.code},
            )

        try:
            entry["translatedText"] = await self.gemini.generate_text(
                DOCUMENT_TRANSLATE_PROMPT.format(
                    source=source, target=target, text=entry["cleanedText"],
                ),
                context=ErrorContext(service="document-translate"),
            )
        except TranslatorError as e:
            logger.warning(
                f"Translation failed for {doc.filename}: {e.message}",
                extra={"error_code": e.code},
            )
            entry["error"] = e.message
        return entry

    async def extract_text(self, doc: UploadedDocument) -> str:
        kind = document_kind(doc)
        if kind == "image":
            prepared = await prepare_image(doc.data, DOCUMENT_OCR_MAX_SIDE)
            text = await self.gemini.generate_text(
                [OCR_PROMPT, self.gemini.image_part(prepared, "image/jpeg")],
                context=ErrorContext(service="ocr"),
            )
            return "" if is_empty_ocr(text) else text
        if kind == "pdf":
            return await asyncio.to_thread(_pdf_text, doc.data)
        if kind == "docx":
            return await asyncio.to_thread(_docx_text, doc.data)
        if kind == "txt":
            return doc.data.decode("utf-8", errors="replace").strip()
        return ""

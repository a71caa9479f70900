"""Upload Routes — image and document translation from multipart uploads.

Invariants:
    - /api/image-translate takes one `image` part; /api/document-translate takes
      one or more `documents` parts (`documents[]` accepted for form libraries that append [])
    - Size and type checks happen in the services; routes only read the parts
"""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.api.dependencies import (
    UsageMeter, get_document_translate_service, get_image_translate_service, metered,
)
from app.api.responses import ok
from app.core.domain_types import UsageType
from app.services.document_translate_service import (
    DocumentTranslateService, UploadedDocument,
)
from app.services.image_translate_service import ImageTranslateService

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post("/image-translate")
async def image_translate(
    image: UploadFile | None = File(None),
    target_lang: str = Form("en", alias="targetLang"),
    source_lang: str = Form("en", alias="sourceLang"),
    service: ImageTranslateService = Depends(get_image_translate_service),
    meter: UsageMeter = Depends(metered(UsageType.IMAGE)),
):
    data = await image.read() if image is not None else b""
    result = await service.translate_image(
        data, image.content_type if image is not None else None, target_lang, source_lang,
    )
    await meter.record()
    return ok(result, **result)


@router.post("/document-translate")
async def document_translate(
    request: Request,
    service: DocumentTranslateService = Depends(get_document_translate_service),
    meter: UsageMeter = Depends(metered(UsageType.DOCUMENT)),
):
    form = await request.form()
    parts = [*form.getlist("documents"), *form.getlist("documents[]")]
    documents = [
        UploadedDocument(
            filename=part.filename or "document",
            content_type=part.content_type or "",
            data=await part.read(),
        )
        for part in parts if not isinstance(part, str)
    ]
    result = await service.translate_documents(
        documents,
        target_lang=str(form.get("targetLang") or "es"),
        source_lang=str(form.get("sourceLang") or "en"),
    )
    await meter.record()
    return ok(result, **result)

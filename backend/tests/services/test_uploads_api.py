"""Upload API tests — image OCR translation and multi-document translation.

Invariants:
    - Non-image uploads to /image-translate are rejected before OCR
    - Images are downscaled to fit 1200px before being sent to Gemini
    - One failing document never fails the batch; results keep upload order
"""

import io

import docx
from PIL import Image

from app.services.image_translate_service import prepare_image


def _png(width: int, height: int) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(out, format="PNG")
    return out.getvalue()


def _docx(*paragraphs: str) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    out = io.BytesIO()
    document.save(out)
    return out.getvalue()


# -- images -------------------------------------------------------------------

async def test_prepare_image_downscales_only():
    with Image.open(io.BytesIO(await prepare_image(_png(2400, 600)))) as big:
        assert big.size == (1200, 300)
        assert big.format == "JPEG"
    with Image.open(io.BytesIO(await prepare_image(_png(100, 50)))) as small:
        assert small.size == (100, 50)


async def test_image_translate(client, gemini, translator):
    gemini.push("HELLO WORLD", "Hello world.")
    resp = await client.post(
        "/api/image-translate",
        files={"image": ("sign.png", _png(40, 20), "image/png")},
        data={"targetLang": "es"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["extractedText"] == "HELLO WORLD"
    assert body["translatedText"] == "[es] Hello world."


async def test_image_without_text(client, gemini, translator):
    gemini.push("No text found")
    resp = await client.post(
        "/api/image-translate",
        files={"image": ("blank.png", _png(40, 20), "image/png")},
    )
    assert resp.json()["data"] == {
        "extractedText": "No text found in the image", "cleanedText": "", "translatedText": "",
    }
    assert translator.calls == []


async def test_image_rejects_other_types(client, gemini):
    resp = await client.post(
        "/api/image-translate",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Only image files are allowed"
    assert gemini.calls == []


# -- documents ----------------------------------------------------------------

async def test_document_translate_batch(client, gemini):
    gemini.push("Hello there.", "Hola.", "First line", "Primera línea")
    resp = await client.post(
        "/api/document-translate",
        files=[
            ("documents", ("note.txt", b"hello there", "text/plain")),
            ("documents", ("report.docx", _docx("First line"), "application/octet-stream")),
            ("documents", ("blob.bin", b"\x00\x01", "application/octet-stream")),
            ("documents", ("broken.pdf", b"not a pdf", "application/pdf")),
        ],
        data={"targetLang": "es"},
    )
    assert resp.status_code == 200
    docs = resp.json()["documents"]
    assert [d["filename"] for d in docs] == ["note.txt", "report.docx", "blob.bin", "broken.pdf"]

    assert docs[0]["translatedText"] == "Hola."
    assert docs[1]["extractedText"] == "First line"
    assert docs[1]["translatedText"] == "Primera línea"
    assert docs[2]["extractedText"] == ""
    assert "error" not in docs[2]
    assert docs[3]["error"].startswith("Extraction failed")
    assert len(gemini.calls) == 4
    assert "from English to Spanish" in gemini.calls[1]


async def test_document_translate_requires_files(client):
    resp = await client.post("/api/document-translate", data={"targetLang": "es"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "No documents uploaded"


async def test_document_translate_bracket_field_name(client, gemini):
    gemini.push("Hi.", "Salut.")
    resp = await client.post(
        "/api/document-translate",
        files=[("documents[]", ("a.txt", b"hi", "text/plain"))],
        data={"targetLang": "fr"},
    )
    assert resp.json()["documents"][0]["translatedText"] == "Salut."


async def test_document_clean_failure_translates_extracted_text(client, gemini):
    gemini.push(gemini.failure(), "Bonjour le monde.")
    resp = await client.post(
        "/api/document-translate",
        files=[("documents", ("a.txt", b"hello world", "text/plain"))],
        data={"targetLang": "fr"},
    )
    [doc] = resp.json()["documents"]
    assert doc["cleanedText"] == "hello world"
    assert doc["translatedText"] == "Bonjour le monde."
    assert "error" not in doc
    assert 'Text: "hello world"' in gemini.calls[1]


async def test_document_translate_failure_is_reported(client, gemini):
    gemini.push("Hello world.", gemini.failure())
    resp = await client.post(
        "/api/document-translate",
        files=[("documents", ("a.txt", b"hello world", "text/plain"))],
        data={"targetLang": "fr"},
    )
    [doc] = resp.json()["documents"]
    assert doc["cleanedText"] == "Hello world."
    assert doc["translatedText"] == ""
    assert doc["error"].startswith("Gemini API error")

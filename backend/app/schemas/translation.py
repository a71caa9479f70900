"""Translation Schemas — bodies of the text, speech, TTS and Gemini endpoints.

Invariants:
    - text fields are non-empty and at most 10 000 characters
    - language fields default the way the mobile client expects (source "en", TTS "en")
"""

from pydantic import Field

from app.schemas import CamelModel


class TranslateRequest(CamelModel):
    text: str = Field(min_length=1, max_length=10_000)
    target_lang: str = Field(min_length=2, max_length=32)
    source_lang: str = "en"


class ManualTranslateRequest(CamelModel):
    text: str = Field(min_length=1, max_length=10_000)
    target_lang: str = Field(min_length=2, max_length=32)


class TextToSpeechRequest(CamelModel):
    # blank text is rejected by TTSService with its own message
    text: str = Field("", max_length=10_000)
    language_code: str = "en"


class GeminiTextRequest(CamelModel):
    text: str = Field(min_length=1, max_length=10_000)
    language: str = "en"


class GeminiTranslateRequest(CamelModel):
    text: str = Field(min_length=1, max_length=10_000)
    source_language: str = "en"
    target_language: str


class SpeechTranslationRequest(CamelModel):
    text: str = Field(min_length=1, max_length=10_000)
    user_language: str = "en"
    target_language: str


class RealtimeStartRequest(CamelModel):
    language_code: str = "en"


class RealtimeAudioRequest(CamelModel):
    session_id: str
    audio_data: str = Field(min_length=1)


class RealtimeStopRequest(CamelModel):
    session_id: str

"""API Overview — endpoint index plus Gemini, CORS and socket introspection.

Invariants:
    - Read-only; nothing here touches the database
    - /api/socket/* answer even before the socket server is attached (stats report the error)
"""

from fastapi import APIRouter, Depends

from app.api.responses import ok
from app.config import Settings, get_settings
from app.infrastructure.gemini_client import ResilientGeminiClient, get_gemini
from app.infrastructure.socket_manager import SocketManager, get_socket_manager

router = APIRouter(prefix="/api", tags=["overview"])

ENDPOINTS = {
    "GET /api": "API overview and endpoints list",
    "GET /api/health": "Liveness summary",
    "GET /api/health/detailed": "Database, Gemini, socket and memory checks",
    "GET /api/gemini/status": "Check Gemini AI connection status",
    "GET /api/cors/info": "View CORS configuration",
    "GET /api/socket/stats": "Get socket connection statistics",
    "GET /api/socket/users": "Get all connected users",
    "POST /api/speech-to-text": "Convert audio to text (batch)",
    "POST /api/realtime-speech-to-text/start": "Start real-time transcription session",
    "POST /api/realtime-speech-to-text/audio": "Send audio chunk for real-time transcription",
    "POST /api/realtime-speech-to-text/stop": "Stop real-time transcription session",
    "POST /api/translate": "Translate text (for voice mode)",
    "POST /api/manual-translate": "Translate text (for manual input)",
    "POST /api/image-translate": "Extract and translate text from images",
    "POST /api/document-translate": "Extract and translate text from documents (PDF, DOCX, TXT, images)",
    "POST /api/text-to-speech": "Convert text to speech",
    "POST /api/gemini/{operation}": "clean, translate, sentiment, extract, speech-translation",
    "POST /api/rooms": "Create a new voice call room",
    "GET /api/rooms": "Get all active rooms",
    "GET /api/rooms/{roomId}": "Get room by ID",
    "POST /api/rooms/{roomId}/join": "Join a room",
    "POST /api/rooms/{roomId}/leave": "Leave a room",
    "POST /api/rooms/{roomId}/end": "End a room (creator only)",
    "GET /api/rooms/stats": "Get room statistics",
    "GET /api/languages/active": "Get active languages",
    "GET /api/voices": "Voice catalog",
    "GET /api/themes": "Theme catalog",
    "GET /api/genders": "Gender catalog",
    "GET /api/countries": "Country catalog",
    "GET /api/country-codes": "Dialing code catalog",
    "GET /api/firebase-auth/me": "Current Firebase user profile",
}


@router.get("")
async def api_overview(settings: Settings = Depends(get_settings)):
    return ok(
        {"version": settings.app_version, "endpoints": ENDPOINTS},
        "Smart Voice Translator Backend API",
    )


@router.get("/gemini/status")
async def gemini_status(gemini: ResilientGeminiClient = Depends(get_gemini)):
    return ok(
        {
            "status": gemini.connection_status(),
            "testResult": await gemini.test_connection(),
        },
        "Gemini AI module status retrieved successfully",
    )


@router.get("/cors/info")
async def cors_info(settings: Settings = Depends(get_settings)):
    return ok(
        {
            "allowedOrigins": settings.all_cors_origins,
            "originRegex": settings.cors_origin_regex,
            "credentials": True,
            "environment": settings.environment,
        },
        "CORS configuration retrieved successfully",
    )


@router.get("/socket/stats")
async def socket_stats(sockets: SocketManager = Depends(get_socket_manager)):
    return ok(sockets.get_stats(), "Socket statistics retrieved successfully")


@router.get("/socket/users")
async def socket_users(sockets: SocketManager = Depends(get_socket_manager)):
    users = sockets.get_all_connected_users()
    return ok(users, "Connected users retrieved successfully", count=len(users))

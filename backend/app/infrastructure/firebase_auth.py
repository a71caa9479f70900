"""Firebase Auth Adapter — verifies ID tokens and loads the Firebase user record.

Invariants:
    - verify() returns a FirebaseIdentity or raises AuthenticationError (never a raw SDK error)
    - Disabled Firebase accounts are rejected ("Account disabled")
    - Service account credentials read from env: inline JSON string or a file path
    - Missing credentials → ServiceUnavailableError on use, never at startup

Design Decisions:
    - firebase-admin calls are blocking: run in a worker thread (asyncio.to_thread)
    - FirebaseIdentity dataclass instead of passing SDK objects into services:
      user_service stays SDK-free and tests build identities directly
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass, field

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from app.core.errors import AuthenticationError, ServiceUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class FirebaseIdentity:
    """Verified Firebase identity, flattened from the token and user record."""
    uid: str
    email: str | None = None
    email_verified: bool = False
    display_name: str | None = None
    photo_url: str | None = None
    phone_number: str | None = None
    disabled: bool = False
    sign_in_provider: str | None = None
    metadata: dict = field(default_factory=dict)

    def to_metadata(self) -> dict:
        """Shape stored in users.firebase_metadata."""
        return {
            "emailVerified": self.email_verified,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "phoneNumber": self.phone_number,
            "signInProvider": self.sign_in_provider,
            **self.metadata,
        }


class FirebaseVerifier:
    """Wraps a firebase_admin App for token verification."""

    def __init__(self, service_account_key: str, project_id: str = ""):
        self._app: firebase_admin.App | None = None
        if service_account_key:
            self._app = _init_app(service_account_key, project_id)

    @property
    def is_configured(self) -> bool:
        return self._app is not None

    async def verify(self, id_token: str) -> FirebaseIdentity:
        if self._app is None:
            raise ServiceUnavailableError("Firebase")
        try:
            decoded = await asyncio.to_thread(
                firebase_auth.verify_id_token, id_token, self._app, True,
            )
            record = await asyncio.to_thread(
                firebase_auth.get_user, decoded["uid"], self._app,
            )
        except firebase_auth.ExpiredIdTokenError:
            raise AuthenticationError("Token expired", "TOKEN_EXPIRED")
        except firebase_auth.RevokedIdTokenError:
            raise AuthenticationError("Token revoked", "TOKEN_REVOKED")
        except firebase_auth.UserDisabledError:
            raise AuthenticationError("Account disabled", "ACCOUNT_DISABLED")
        except firebase_auth.UserNotFoundError:
            raise AuthenticationError("User not found", "USER_NOT_FOUND")
        except (firebase_auth.InvalidIdTokenError, ValueError):
            raise AuthenticationError("Invalid token", "INVALID_TOKEN")

        if record.disabled:
            raise AuthenticationError("Account disabled", "ACCOUNT_DISABLED")

        user_meta = record.user_metadata
        return FirebaseIdentity(
            uid=record.uid,
            email=record.email or decoded.get("email"),
            email_verified=bool(record.email_verified),
            display_name=record.display_name,
            photo_url=record.photo_url,
            phone_number=record.phone_number,
            disabled=record.disabled,
            sign_in_provider=(decoded.get("firebase") or {}).get("sign_in_provider"),
            metadata={
                "creationTime": getattr(user_meta, "creation_timestamp", None),
                "lastSignInTime": getattr(user_meta, "last_sign_in_timestamp", None),
            },
        )


def _init_app(service_account_key: str, project_id: str) -> firebase_admin.App:
    if service_account_key.lstrip().startswith("{"):
        cert = credentials.Certificate(json.loads(service_account_key))
    elif os.path.isfile(service_account_key):
        cert = credentials.Certificate(service_account_key)
    else:
        raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is neither JSON nor a file path")
    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(cert, options, name="translator")
    logger.info("Firebase Admin initialized")
    return app


# Singleton (initialized on startup)
firebase_verifier: FirebaseVerifier | None = None


def init_firebase(settings) -> FirebaseVerifier:
    global firebase_verifier
    try:
        firebase_verifier = FirebaseVerifier(
            settings.firebase_service_account_key, settings.firebase_project_id,
        )
    except ValueError as e:
        logger.error(f"Firebase credentials invalid: {e}")
        firebase_verifier = FirebaseVerifier("")
    if not firebase_verifier.is_configured:
        logger.warning("Firebase not configured — authenticated routes return 503")
    return firebase_verifier


def get_firebase_verifier() -> FirebaseVerifier:
    if firebase_verifier is None:
        from app.config import get_settings
        return init_firebase(get_settings())
    return firebase_verifier

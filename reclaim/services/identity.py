import json
import os
from abc import ABC, abstractmethod

import firebase_admin
import requests
from firebase_admin import credentials, firestore

from reclaim.errors import (
    EmailInUse,
    ExternalServiceFailure,
    InvalidCredentials,
    NotFound,
    WeakPassword,
)
from reclaim.models.user import UserProfile
from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{method}"
REQUEST_TIMEOUT = 10

INVALID_CREDENTIAL_CODES = {"INVALID_LOGIN_CREDENTIALS", "INVALID_PASSWORD", "EMAIL_NOT_FOUND", "USER_DISABLED"}


def init_firebase():
    """Initialise the default firebase_admin app once, from env credentials."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    cred_obj = None
    json_string = os.getenv("FIREBASE_CREDENTIALS_JSON_STRING")
    cred_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    if json_string:
        cred_obj = credentials.Certificate(json.loads(json_string))
        logger.info("Firebase credentials loaded from FIREBASE_CREDENTIALS_JSON_STRING.")
    elif cred_file:
        cred_obj = credentials.Certificate(cred_file)
        logger.info("Firebase credentials loaded from GOOGLE_APPLICATION_CREDENTIALS file.")
    else:
        logger.warning("Firebase credentials not found, using application default credentials.")

    options = {}
    project_id = os.getenv("FIREBASE_PROJECT_ID")
    if project_id:
        options["projectId"] = project_id

    return firebase_admin.initialize_app(cred_obj, options or None)


class ProfileStore(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> UserProfile:
        """Raise NotFound when the user has no profile."""

    @abstractmethod
    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        ...


class IdentityProvider(ABC):
    @abstractmethod
    def create_account(self, email: str, password: str, profile: UserProfile) -> str:
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> str:
        ...

    @abstractmethod
    def send_password_reset(self, email: str) -> None:
        ...


class FirestoreProfileStore(ProfileStore):
    """Profiles under users/{uid}, camelCase fields as the web client writes them."""

    collection = "users"

    def __init__(self, client=None):
        self._client = client

    def _db(self):
        if self._client is None:
            init_firebase()
            self._client = firestore.client()
        return self._client

    def get_profile(self, user_id: str) -> UserProfile:
        try:
            snap = self._db().collection(self.collection).document(user_id).get()
        except Exception as e:
            logger.warning("Firestore profile read failed uid=%s: %s", user_id, e)
            raise ExternalServiceFailure(str(e))

        if not snap.exists:
            raise NotFound("User not found")

        return UserProfile.model_validate(snap.to_dict() or {})

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        try:
            self._db().collection(self.collection).document(user_id).set(profile.model_dump(by_alias=True))
        except Exception as e:
            logger.warning("Firestore profile write failed uid=%s: %s", user_id, e)
            raise ExternalServiceFailure(str(e))


class FirebaseIdentityProvider(IdentityProvider):
    """Email/password accounts through the Firebase Identity Toolkit REST API."""

    def __init__(self, profiles: ProfileStore, api_key: str | None = None, session=None):
        self.profiles = profiles
        self.api_key = api_key or os.getenv("FIREBASE_API_KEY")
        self.http = session or requests.Session()

    def _call(self, method: str, payload: dict) -> dict:
        if not self.api_key:
            raise ExternalServiceFailure("FIREBASE_API_KEY is not configured")

        try:
            response = self.http.post(
                IDENTITY_TOOLKIT_URL.format(method=method),
                params={"key": self.api_key},
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.warning("Identity provider unreachable method=%s: %s", method, e)
            raise ExternalServiceFailure(str(e))

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = (data.get("error") or {}).get("message") or response.text or "Unknown error"
            code = message.split(" ", 1)[0].strip(":")
            logger.warning("Identity provider error method=%s code=%s", method, code)
            raise self._map_error(code, message)

        return data

    @staticmethod
    def _map_error(code: str, message: str) -> ExternalServiceFailure:
        if code == "EMAIL_EXISTS":
            return EmailInUse(message, code)
        if code == "WEAK_PASSWORD":
            return WeakPassword(message, code)
        if code in INVALID_CREDENTIAL_CODES:
            return InvalidCredentials(message, code)
        return ExternalServiceFailure(message, code)

    def create_account(self, email: str, password: str, profile: UserProfile) -> str:
        data = self._call("signUp", {"email": email, "password": password, "returnSecureToken": True})
        user_id = data["localId"]

        self.profiles.save_profile(user_id, profile)
        logger.info("account created uid=%s", user_id)
        return user_id

    def sign_in(self, email: str, password: str) -> str:
        data = self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return data["localId"]

    def send_password_reset(self, email: str) -> None:
        self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
        logger.info("password reset requested")

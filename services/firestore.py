# services/firestore.py
import logging
import os
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.client import Client
from google.cloud.firestore_v1.document import DocumentReference

import config
from services.record_store import RecordStore


def initialize_firebase_app():
    if not firebase_admin._apps:
        cred_path = os.environ.get(
            "GOOGLE_APPLICATION_CREDENTIALS",
            os.path.join(os.path.dirname(__file__), "..", "service-account.json"),
        )
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Service account key not found at {cred_path}.")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)
        logging.info("Firebase Admin SDK initialized successfully.")


class FirestoreRecordStore(RecordStore):
    """
    Keeps each store key in its own document under
    users/{uid}/appState/{key}, with the payload in the "value" field.
    Overwriting a document replaces the whole collection it holds.
    """

    def __init__(self, uid: str = config.FIRESTORE_USER_ID, client: Optional[Client] = None):
        if client is None:
            initialize_firebase_app()
            client = firestore.client()
        self.db: Client = client
        self.uid = uid

    def _document(self, key: str) -> DocumentReference:
        return (
            self.db.collection(config.FIRESTORE_USERS_COLLECTION)
            .document(self.uid)
            .collection(config.FIRESTORE_STATE_COLLECTION)
            .document(key)
        )

    def _get(self, key: str) -> Optional[Any]:
        snapshot = self._document(key).get()
        if not snapshot.exists:
            return None
        return (snapshot.to_dict() or {}).get("value")

    def _set(self, key: str, value: Any):
        self._document(key).set({"value": value})

    def _delete(self, key: str):
        self._document(key).delete()
        logging.info(f"Deleted '{key}' for user {self.uid}.")

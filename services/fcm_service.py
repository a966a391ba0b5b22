import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from config import FIREBASE_CREDENTIALS_PATH
from utils.logger import get_logger

logger = get_logger(__name__)

# Firebase Admin is initialised once per process
_initialized = False


def initialize_firebase_admin():
    """Initialise the Firebase Admin SDK from the service account file, if present."""
    global _initialized
    if _initialized:
        return

    try:
        if os.path.exists(FIREBASE_CREDENTIALS_PATH):
            cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
            firebase_admin.initialize_app(cred)
            _initialized = True
            logger.info("Firebase Admin initialised with %s", FIREBASE_CREDENTIALS_PATH)
        elif os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
            # production: application default credentials
            firebase_admin.initialize_app()
            _initialized = True
            logger.info("Firebase Admin initialised from GOOGLE_APPLICATION_CREDENTIALS")
        else:
            logger.warning("Firebase credentials not found at %s; push notifications disabled", FIREBASE_CREDENTIALS_PATH)
    except (ValueError, OSError) as e:
        logger.error("Error initialising Firebase Admin: %s", e)
        _initialized = False


def send_notification(
    fcm_token: str,
    title: str,
    body: str,
    data: Optional[dict] = None
) -> bool:
    """Send a push notification to one device. Returns False instead of raising."""
    initialize_firebase_admin()

    if not _initialized or not fcm_token:
        return False

    try:
        message = messaging.Message(
            notification=messaging.Notification(
                title=title,
                body=body,
            ),
            data={k: str(v) for k, v in (data or {}).items()},
            token=fcm_token,
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(
                    aps=messaging.Aps(
                        badge=1,
                        sound="default",
                    ),
                ),
            ),
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    sound="default",
                    channel_id="trip_invitations",
                ),
            ),
        )

        response = messaging.send(message)
        logger.info("Push notification sent: %s", response)
        return True
    except (exceptions.FirebaseError, ValueError) as e:
        logger.warning("Error sending push notification: %s", e)
        return False


def notify_trip_invitation(fcm_token: Optional[str], inviter_name: str, trip_title: str,
                           invitation_id: str, trip_id: int) -> bool:
    if not fcm_token:
        return False
    return send_notification(
        fcm_token=fcm_token,
        title="New trip invitation",
        body=f"{inviter_name} invited you to join the trip: {trip_title}",
        data={
            "type": "trip_invitation",
            "invitation_id": invitation_id,
            "trip_id": trip_id,
        },
    )

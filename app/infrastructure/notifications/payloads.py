"""Channel payload construction.

Maps one NotificationIntent onto the Android, APNs and web-push sections
of a single gateway message. Medication reminders must arrive right away
or not at all, so every platform gets its highest delivery priority and
Android gets a short time-to-live.
"""

import json
from typing import Any, Dict, Optional, Tuple

from infrastructure.notifications.clock import Clock, SystemClock
from infrastructure.notifications.models import (
    AndroidConfig,
    AndroidNotification,
    ApnsConfig,
    ChannelPayload,
    NotificationCategory,
    NotificationContent,
    NotificationIntent,
    WebpushConfig,
)

DEFAULT_ANDROID_TTL_MS = 60000

HIGH_IMPORTANCE_CHANNEL = "high_importance_channel"
TAKEN_PILL_CHANNEL = "taken_pill_channel"

DEFAULT_CONTENT: Dict[NotificationCategory, Tuple[str, str]] = {
    NotificationCategory.GENERIC: ("Medication Reminder", "Medication notification"),
    NotificationCategory.MEDICATION_REMINDER: (
        "Medication Reminder",
        "Medication notification",
    ),
    NotificationCategory.MEDICATION_TAKEN: (
        "Medication Taken",
        "Medication notification",
    ),
}


def android_channel_for(category: NotificationCategory) -> str:
    """Android notification channel id for a category."""
    if category == NotificationCategory.MEDICATION_TAKEN:
        return TAKEN_PILL_CHANNEL
    return HIGH_IMPORTANCE_CHANNEL


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    return str(value)


class PayloadBuilder:
    """Builds the channel payload for a validated intent.

    The only input besides the intent is the clock, used to stamp
    ``data.timestamp`` when the caller did not supply one. Given the same
    intent and the same clock reading, the output is identical.

    Args:
        android_ttl_ms: Android time-to-live in milliseconds
        clock: Clock used for the generated timestamp

    Example:
        builder = PayloadBuilder()
        payload = builder.build(intent)
        payload.android.notification.channel_id  # "high_importance_channel"
    """

    def __init__(
        self,
        android_ttl_ms: int = DEFAULT_ANDROID_TTL_MS,
        clock: Optional[Clock] = None,
    ):
        self.android_ttl_ms = android_ttl_ms
        self.clock = clock or SystemClock()

    def build(self, intent: NotificationIntent) -> ChannelPayload:
        """Build the channel payload for ``intent``."""
        title, body = self.visible_content(intent)
        return ChannelPayload(
            token=intent.recipient_token,
            notification=NotificationContent(title=title, body=body),
            data=self.build_data(intent, title, body),
            android=AndroidConfig(
                priority="high",
                ttl=self.android_ttl_ms,
                notification=AndroidNotification(
                    channel_id=android_channel_for(intent.category),
                    default_sound=True,
                    default_vibrate_timings=True,
                ),
            ),
            apns=ApnsConfig(
                headers={"apns-priority": "10", "apns-push-type": "alert"},
                payload={
                    "aps": {
                        "sound": "default",
                        "badge": 1,
                        "content-available": 1,
                        "mutable-content": 1,
                    }
                },
            ),
            webpush=WebpushConfig(headers={"Urgency": "high"}),
        )

    @staticmethod
    def visible_content(intent: NotificationIntent) -> Tuple[str, str]:
        """Title and body shown to the user.

        The intent's own values win; otherwise category boilerplate is used.
        A ``title`` or ``body`` inside structured data never replaces the
        visible content.
        """
        default_title, default_body = DEFAULT_CONTENT[intent.category]
        title = (intent.title or "").strip() or default_title
        body = (intent.body or "").strip() or default_body
        return title, body

    def build_data(
        self, intent: NotificationIntent, title: str, body: str
    ) -> Dict[str, str]:
        """String-only data section, keys sorted."""
        data = {
            str(key): _stringify(value)
            for key, value in intent.structured_data.items()
            if value is not None
        }
        data.setdefault("timestamp", str(self.clock.epoch_millis()))
        data.setdefault("type", intent.category.value)
        # Receiving apps read the same title/body as the one displayed
        data["title"] = title
        data["body"] = body
        return dict(sorted(data.items()))

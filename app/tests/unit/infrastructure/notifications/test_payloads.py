"""Unit tests for the channel payload builder."""

import pytest

from infrastructure.notifications.models import NotificationCategory, NotificationIntent
from infrastructure.notifications.payloads import (
    HIGH_IMPORTANCE_CHANNEL,
    TAKEN_PILL_CHANNEL,
    PayloadBuilder,
    android_channel_for,
)


@pytest.mark.unit
class TestAndroidChannel:
    """Category -> Android notification channel."""

    def test_medication_taken_uses_taken_pill_channel(self):
        assert android_channel_for(NotificationCategory.MEDICATION_TAKEN) == TAKEN_PILL_CHANNEL

    @pytest.mark.parametrize(
        "category",
        [NotificationCategory.GENERIC, NotificationCategory.MEDICATION_REMINDER],
    )
    def test_other_categories_use_high_importance_channel(self, category):
        assert android_channel_for(category) == HIGH_IMPORTANCE_CHANNEL


@pytest.mark.unit
class TestPayloadBuilder:
    """Tests for PayloadBuilder.build."""

    def test_reminder_payload_platform_sections(self, intent_factory, fixed_clock):
        """A reminder gets high priority and short expiry on every platform."""
        payload = PayloadBuilder(clock=fixed_clock).build(intent_factory())

        assert payload.token == "T1"
        assert payload.notification.title == "Time for pills"
        assert payload.notification.body == "Take aspirin"
        assert payload.android.priority == "high"
        assert payload.android.ttl == 60000
        assert payload.android.notification.channel_id == "high_importance_channel"
        assert payload.android.notification.default_sound is True
        assert payload.android.notification.default_vibrate_timings is True
        assert payload.apns.headers["apns-priority"] == "10"
        assert payload.apns.headers["apns-push-type"] == "alert"
        assert payload.apns.payload == {
            "aps": {
                "sound": "default",
                "badge": 1,
                "content-available": 1,
                "mutable-content": 1,
            }
        }
        assert payload.webpush.headers == {"Urgency": "high"}

    def test_taken_category_switches_channel(self, intent_factory, fixed_clock):
        intent = intent_factory(category="medication_taken")

        payload = PayloadBuilder(clock=fixed_clock).build(intent)

        assert payload.android.notification.channel_id == "taken_pill_channel"

    def test_default_content_when_intent_has_none(self, fixed_clock):
        intent = NotificationIntent(recipientToken="T1")

        payload = PayloadBuilder(clock=fixed_clock).build(intent)

        assert payload.notification.title == "Medication Reminder"
        assert payload.notification.body == "Medication notification"
        assert payload.data["title"] == "Medication Reminder"
        assert payload.data["body"] == "Medication notification"

    def test_default_title_not_replaced_by_structured_data_title(self, fixed_clock):
        """A title inside structured data never replaces the visible title."""
        intent = NotificationIntent(
            recipientToken="T1",
            structuredData={"title": "from data", "pillName": "Aspirin"},
        )

        payload = PayloadBuilder(clock=fixed_clock).build(intent)

        assert payload.notification.title == "Medication Reminder"
        assert payload.data["title"] == "Medication Reminder"
        assert payload.data["pillName"] == "Aspirin"

    def test_data_values_are_strings(self, intent_factory, fixed_clock):
        intent = intent_factory(
            data={"dose": 2, "withFood": True, "times": ["08:00", "20:00"], "skip": None}
        )

        data = PayloadBuilder(clock=fixed_clock).build(intent).data

        assert data["dose"] == "2"
        assert data["withFood"] == "true"
        assert data["times"] == '["08:00","20:00"]'
        assert "skip" not in data
        assert all(isinstance(value, str) for value in data.values())

    def test_timestamp_and_type_generated(self, intent_factory, fixed_clock):
        data = PayloadBuilder(clock=fixed_clock).build(intent_factory()).data

        assert data["timestamp"] == str(fixed_clock.epoch_millis())
        assert data["type"] == "medication-reminder"

    def test_supplied_timestamp_and_type_kept(self, intent_factory, fixed_clock):
        intent = intent_factory(data={"timestamp": "123", "type": "custom"})

        data = PayloadBuilder(clock=fixed_clock).build(intent).data

        assert data["timestamp"] == "123"
        assert data["type"] == "custom"

    def test_build_is_deterministic_except_timestamp(self, intent_factory, fixed_clock):
        builder = PayloadBuilder(clock=fixed_clock)
        intent = intent_factory(data={"b": "2", "a": "1"})

        first = builder.build(intent)
        fixed_clock.advance(5)
        second = builder.build(intent)

        first_dump = first.model_dump()
        second_dump = second.model_dump()
        assert first_dump["data"].pop("timestamp") != second_dump["data"].pop("timestamp")
        assert first_dump == second_dump
        assert list(first.data) == sorted(first.data)

    def test_custom_ttl(self, intent_factory, fixed_clock):
        payload = PayloadBuilder(android_ttl_ms=30000, clock=fixed_clock).build(
            intent_factory()
        )

        assert payload.android.ttl == 30000


@pytest.mark.unit
class TestFcmMessageRendering:
    """Tests for ChannelPayload.to_fcm_message."""

    def test_ttl_rendered_as_duration(self, intent_factory, fixed_clock):
        message = PayloadBuilder(clock=fixed_clock).build(intent_factory()).to_fcm_message()

        assert message["android"]["ttl"] == "60s"
        assert message["token"] == "T1"
        assert message["notification"] == {
            "title": "Time for pills",
            "body": "Take aspirin",
        }
        assert message["apns"]["headers"]["apns-priority"] == "10"
        assert message["webpush"]["headers"]["Urgency"] == "high"

    def test_fractional_ttl(self, intent_factory, fixed_clock):
        message = (
            PayloadBuilder(android_ttl_ms=1500, clock=fixed_clock)
            .build(intent_factory())
            .to_fcm_message()
        )

        assert message["android"]["ttl"] == "1.500s"

"""Tests for the push channel: fake adapter and channel registry."""

from freshcart.notifications.channel import get_push_channel, reset_channels, set_push_channel
from freshcart.notifications.channel.fake_push import FakePushAdapter


class TestFakePushAdapter:
    def setup_method(self):
        self.adapter = FakePushAdapter()

    def test_send_records_push(self):
        result = self.adapter.send(recipient_id="user-1", title="Hi", body="Hello!", data={"orderId": "o-1"})

        assert result["status"] == "sent"
        assert result["message_id"].startswith("push-")
        [push] = self.adapter.sent_pushes
        assert push["room"] == "user:user-1"
        assert push["data"] == {"orderId": "o-1"}

    def test_sent_to_filters_by_recipient(self):
        self.adapter.send(recipient_id="user-1", title="A", body="a")
        self.adapter.send(recipient_id="user-2", title="B", body="b")

        assert [p["title"] for p in self.adapter.sent_to("user-2")] == ["B"]

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="socket closed")
        result = self.adapter.send(recipient_id="user-1", title="Hi", body="Hello")

        assert result == {"message_id": None, "status": "failed", "error": "socket closed"}
        assert self.adapter.sent_pushes == []

    def test_reset(self):
        self.adapter.send(recipient_id="user-1", title="Hi", body="Hello")
        self.adapter.configure(should_succeed=False)
        self.adapter.reset()

        assert self.adapter.sent_pushes == []
        assert self.adapter.should_succeed is True


class TestChannelRegistry:
    def teardown_method(self):
        reset_channels()

    def test_defaults_to_fake_singleton(self):
        reset_channels()
        channel = get_push_channel()

        assert isinstance(channel, FakePushAdapter)
        assert get_push_channel() is channel

    def test_set_push_channel(self):
        adapter = FakePushAdapter()
        set_push_channel(adapter)

        assert get_push_channel() is adapter

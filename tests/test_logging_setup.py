"""
Tests for masking secrets in log records.
"""

import pytest
from loguru import logger

from vexinfo.config.settings import settings
from vexinfo.logging.setup import MASK, sensitive_data_filter

SUPABASE_KEY = "eyJhbGciOiJIUzI1NiJ9.anon"


@pytest.fixture(autouse=True)
def supabase_key(monkeypatch):
    monkeypatch.setattr(settings, "supabase_key", SUPABASE_KEY)


class TestSensitiveDataFilter:
    def test_masks_supabase_key_in_message(self):
        record = {"message": f"connecting with {SUPABASE_KEY}", "extra": {}}
        assert sensitive_data_filter(record) is True
        assert record["message"] == f"connecting with {MASK}"

    def test_masks_secret_named_extras(self):
        record = {
            "message": "upsert",
            "extra": {
                "api_token": "abc123",
                "team": "90241B",
                "auth": {"password": "hunter2", "user": "scout"},
                "headers": [{"X-Secret": "s3"}],
            },
        }
        sensitive_data_filter(record)
        assert record["extra"]["api_token"] == MASK
        assert record["extra"]["team"] == "90241B"
        assert record["extra"]["auth"] == {"password": MASK, "user": "scout"}
        assert record["extra"]["headers"] == [{"X-Secret": MASK}]

    def test_message_without_key_is_unchanged(self):
        record = {"message": "Fetched team 90241B", "extra": {}}
        sensitive_data_filter(record)
        assert record["message"] == "Fetched team 90241B"

    def test_loguru_sink_receives_masked_output(self):
        messages = []
        handler_id = logger.add(
            messages.append,
            format="{message} {extra[supabase_key]}",
            filter=sensitive_data_filter,
        )
        try:
            logger.bind(supabase_key="plain").info(f"key={SUPABASE_KEY}")
        finally:
            logger.remove(handler_id)

        assert len(messages) == 1
        assert SUPABASE_KEY not in messages[0]
        assert "plain" not in messages[0]
        assert messages[0].strip() == f"key={MASK} {MASK}"

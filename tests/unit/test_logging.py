"""로깅 유틸리티 테스트 (correlation ID 필터, 로그 마스킹)"""

import logging

from puphax_gateway.core.config import settings
from puphax_gateway.core.logging import (
    CorrelationIdFilter,
    build_formatter,
    logger,
    sanitize_for_log,
    with_correlation,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("puphax_gateway", logging.ERROR, __file__, 1, "upstream down", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationIdFilter:

    def test_missing_id_defaults_to_dash(self):
        record = _record()
        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"

    def test_existing_id_kept(self):
        record = _record(**with_correlation("req-0123456789ab"))
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "req-0123456789ab"

    def test_formatter_renders_id(self):
        record = _record(**with_correlation("req-0123456789ab"))
        line = build_formatter(production=True).format(record)
        assert "[req-0123456789ab] upstream down" in line

    def test_gateway_logger_carries_filter(self, caplog):
        with caplog.at_level(logging.INFO, logger="puphax_gateway"):
            logger.info("no request here")
            logger.info("request scoped", extra=with_correlation("req-aaaaaaaaaaaa"))
        assert [r.correlation_id for r in caplog.records[-2:]] == ["-", "req-aaaaaaaaaaaa"]


class TestSanitizeForLog:

    def test_empty(self):
        assert sanitize_for_log("") == "[empty]"

    def test_sensitive_keyword_masks_whole_value(self):
        assert sanitize_for_log("token=abc") == "***"

    def test_configured_upstream_password_masked(self, monkeypatch):
        monkeypatch.setattr(settings, "upstream_password", "s3cr3t-pw")
        assert sanitize_for_log("login PUPHAX:s3cr3t-pw") == "login PUPHAX:***"

    def test_newlines_removed(self):
        assert sanitize_for_log("aspirin\r\nFAKE LINE") == "aspirin  FAKE LINE"

    def test_truncated(self):
        assert sanitize_for_log("x" * 120, max_length=10) == "x" * 10 + "..."

"""
Tests for log formatting and setup.
"""
import logging

from mylife.utils.logging import LOG_FORMAT, ContextFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("mylife.core.services.tag_service", logging.INFO, __file__, 1, "Created tag %s", ("t1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextFormatter:
    def test_extra_fields_are_appended_sorted(self):
        line = ContextFormatter("%(levelname)s %(message)s").format(make_record(tag_name="Travelling", count=2))
        assert line == "INFO Created tag t1 | count=2 tag_name='Travelling'"

    def test_plain_record_is_unchanged(self):
        line = ContextFormatter("%(levelname)s %(message)s").format(make_record())
        assert line == "INFO Created tag t1"


class TestSetupLogging:
    def test_handler_is_attached_once(self):
        setup_logging()
        setup_logging()

        handlers = [h for h in logging.getLogger("mylife").handlers if isinstance(h.formatter, ContextFormatter)]
        assert len(handlers) == 1
        assert handlers[0].formatter._fmt == LOG_FORMAT

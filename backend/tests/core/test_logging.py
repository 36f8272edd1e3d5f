"""
Tests for logging configuration.
"""
import structlog

from tradebinder.core.logging import SERVICE_NAME, add_service, setup_logging


def test_add_service_tags_event():
    event = add_service(None, "info", {"event": "Cache miss", "key": "card:1"})

    assert event["service"] == SERVICE_NAME
    assert event["key"] == "card:1"


def test_add_service_keeps_explicit_service():
    event = add_service(None, "info", {"event": "x", "service": "worker"})

    assert event["service"] == "worker"


def test_setup_logging_installs_service_processor():
    setup_logging()

    processors = structlog.get_config()["processors"]
    assert add_service in processors
    assert processors.index(add_service) < len(processors) - 1

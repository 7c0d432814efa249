import io
import json
import logging

import structlog
from fastapi.testclient import TestClient

from storyfoundry import main
from storyfoundry.core.config import settings
from storyfoundry.infrastructure.observability import configure_structlog, get_tracer, render_metrics


def test_requests_are_counted_and_exposed():
    client = TestClient(main.app)

    assert client.get("/health").status_code == 200
    response = client.get(settings.METRICS_PATH)

    assert response.status_code == 200
    body = response.text
    assert "storyfoundry_http_requests_total" in body
    assert 'path="/health"' in body


def test_render_metrics_lists_project_counters():
    output = render_metrics().decode("utf-8")
    assert "storyfoundry_project_creation_total" in output
    assert "storyfoundry_supabase_request_duration_seconds" in output


def test_get_tracer_without_setup_is_usable():
    tracer = get_tracer("storyfoundry.tests")
    with tracer.start_as_current_span("noop") as span:
        span.set_attribute("answer", 42)


def test_configure_structlog_renders_stdlib_records_as_json():
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    logger = logging.getLogger("storyfoundry.services.project_service")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        configure_structlog(handlers=[handler])
        logger.warning("Project created %s", "p1")
        structlog.get_logger("storyfoundry.services.project_service").info("ip_timestamp", project_id="p1")
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
        structlog.reset_defaults()

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert lines[0]["event"] == "Project created p1"
    assert lines[0]["level"] == "warning"
    assert lines[0]["logger"] == "storyfoundry.services.project_service"
    assert "timestamp" in lines[0]
    assert lines[1]["event"] == "ip_timestamp"
    assert lines[1]["project_id"] == "p1"

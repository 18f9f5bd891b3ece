import logging

from reclaim.utils.logging_config import RequestIdFilter, build_dict_config, set_request_id


def test_request_id_filter_stamps_records():
    set_request_id("abc123")
    record = logging.LogRecord("reclaim", logging.INFO, __file__, 1, "hello", None, None)

    assert RequestIdFilter().filter(record)
    assert record.request_id == "abc123"


def test_json_format_variant():
    plain = build_dict_config()
    as_json = build_dict_config(json_fmt=True, level="DEBUG")

    assert "rid=%(request_id)s" in plain["formatters"]["default"]["format"]
    assert as_json["formatters"]["default"]["format"].startswith('{"ts"')
    assert as_json["handlers"]["console"]["level"] == "DEBUG"


def test_request_id_header_echoed(client):
    res = client.get("/", headers={"X-Request-ID": "req-42"})
    assert res.headers["X-Request-ID"] == "req-42"

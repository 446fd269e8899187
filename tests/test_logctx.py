import logging

from csvquery.logctx import RequestIdFilter, request_id_var


def make_record():
    return logging.LogRecord("csvquery", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_defaults_to_dash():
    record = make_record()
    assert RequestIdFilter().filter(record)
    assert record.request_id == "-"


def test_filter_uses_bound_request_id():
    token = request_id_var.set("rid-42")
    try:
        record = make_record()
        RequestIdFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "rid-42"

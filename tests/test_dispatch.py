import io

import pytest
import requests
from starlette.datastructures import UploadFile

from csvquery import dispatch as dispatch_module
from csvquery.config import Settings
from csvquery.dispatch import OperationDispatcher, OperationRequest
from csvquery.errors import InvalidArgument, MalformedCSV, NetworkError, NotFound


def test_read_local_file(settings):
    assert OperationDispatcher(settings).read() == "name$age$city\nJohn$30$New York"


def test_read_is_deterministic(settings):
    dispatcher = OperationDispatcher(settings)
    assert dispatcher.read() == dispatcher.read()


def test_read_rereads_the_file_each_call(settings, dataset):
    dispatcher = OperationDispatcher(settings)
    dispatcher.read()
    dataset.write_text("changed\n", encoding="utf-8")
    assert dispatcher.read() == "changed"


def test_read_missing_file(tmp_path):
    dispatcher = OperationDispatcher(Settings(csv_file_path=str(tmp_path / "missing.csv")))
    with pytest.raises(NotFound):
        dispatcher.read()


def test_read_remote_unreachable(monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(requests, "get", fake_get)
    dispatcher = OperationDispatcher(
        Settings(read_source="remote", remote_url="http://unreachable.test/data.csv")
    )
    with pytest.raises(NetworkError):
        dispatcher.read()


def test_upload_inline_string(settings):
    assert OperationDispatcher(settings).upload_csv("a,b\nc,d") == "a$b\nc$d"


def test_upload_empty_string(settings):
    assert OperationDispatcher(settings).upload_csv("") == ""


@pytest.mark.parametrize("argument", [None, 42, b"a,b", ["a", "b"], {"file": "a,b"}])
def test_upload_rejects_wrong_shape_before_decoding(settings, monkeypatch, argument):
    def must_not_decode(*args, **kwargs):
        raise AssertionError("decoder called")

    monkeypatch.setattr(dispatch_module, "decode_text", must_not_decode)
    monkeypatch.setattr(dispatch_module, "decode", must_not_decode)

    with pytest.raises(InvalidArgument):
        OperationDispatcher(settings).upload_csv(argument)


def test_upload_malformed_inline(settings):
    with pytest.raises(MalformedCSV):
        OperationDispatcher(settings).upload_csv('a,"b')


def test_upload_multipart_part(multipart_settings):
    spool = io.BytesIO(b"a,,c\n1,2,3\n")
    part = UploadFile(file=spool, filename="upload.csv")

    assert OperationDispatcher(multipart_settings).upload_csv(part) == "a$ $c\n1$2$3"
    assert spool.closed


def test_upload_multipart_rejects_string(multipart_settings):
    with pytest.raises(InvalidArgument):
        OperationDispatcher(multipart_settings).upload_csv("a,b")


def test_upload_multipart_spool_closed_on_decode_failure(multipart_settings):
    spool = io.BytesIO(b'"never closed')
    with pytest.raises(MalformedCSV):
        OperationDispatcher(multipart_settings).upload_csv(UploadFile(file=spool, filename="bad.csv"))
    assert spool.closed


def test_upload_does_not_change_read(settings, dataset):
    dispatcher = OperationDispatcher(settings)
    before = dataset.read_bytes()

    assert dispatcher.upload_csv("other,data") == "other$data"
    assert dispatcher.read() == "name$age$city\nJohn$30$New York"
    assert dataset.read_bytes() == before


def test_dispatch_routes_by_name(settings):
    dispatcher = OperationDispatcher(settings)
    assert dispatcher.dispatch(OperationRequest("read")) == "name$age$city\nJohn$30$New York"
    assert dispatcher.dispatch(OperationRequest("uploadCSV", "x,y")) == "x$y"


def test_dispatch_unknown_operation(settings):
    with pytest.raises(InvalidArgument):
        OperationDispatcher(settings).dispatch(OperationRequest("delete"))


def test_dispatch_read_takes_no_argument(settings):
    with pytest.raises(InvalidArgument):
        OperationDispatcher(settings).dispatch(OperationRequest("read", "a,b"))

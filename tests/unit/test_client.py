# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import os
import threading
import unittest

import pytest

from restclient import RestClient
from restclient.config import ClientConfig, HttpSettings
from restclient.errors import (
    ErrorCategory,
    InvalidArgumentError,
    PreconditionFailedError,
    TransportError,
)
from restclient.http.adapters import StubTransport
from restclient.http.models import HttpRequest, HttpResponse


class RecordingTransport:
    """Returns a canned response for every URL and remembers what was sent."""

    def __init__(self, response: HttpResponse | None = None):
        self.response = response or HttpResponse(status_code=200, headers={"Content-Type": "text/plain"}, content=b"ok", text="ok")
        self.requests: list[HttpRequest] = []
        self.closed = False

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        return self.response

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> HttpRequest:
        return self.requests[-1]


def make_client(**options) -> tuple[RestClient, RecordingTransport]:
    transport = RecordingTransport()
    client = RestClient(transport=transport, settings=HttpSettings(user_agent="UA/1.0"), **options)
    return client, transport


@pytest.fixture
def tls_files(tmp_path):
    cert = tmp_path / "client.crt"
    key = tmp_path / "client.key"
    ca = tmp_path / "ca.pem"
    for path in (cert, key, ca):
        path.write_text("-----BEGIN PLACEHOLDER-----\n")
    return str(cert), str(key), str(ca)


def test_construction_accepts_config_mapping_and_keywords():
    client = RestClient({"host": "http://a", "timeout": 5}, cert="/c", transport=RecordingTransport())
    assert client.get_host() == "http://a"
    assert client.get_timeout() == 5.0
    assert client.get_cert() == "/c"
    assert client.get_key() is None
    assert client.get_ca() is None

    cfg = ClientConfig(host="http://b")
    other = RestClient(cfg, transport=RecordingTransport())
    other.set_host("http://c")
    assert cfg.host == "http://b"


def test_construction_never_fails_on_malformed_options():
    client = RestClient({"host": 12, "timeout": "soon", "bogus": object()}, transport=RecordingTransport())
    assert client.host is None
    assert client.timeout is None
    assert RestClient("not-a-mapping", transport=RecordingTransport()).host is None


def test_accessors_get_and_set_without_validation():
    client, _ = make_client()
    assert client.set_host("https://example.com") == "https://example.com"
    assert client.set_cert("/missing.crt") == "/missing.crt"
    assert client.set_key("/missing.key") == "/missing.key"
    assert client.set_ca("/missing.ca") == "/missing.ca"
    assert client.set_timeout(10) == 10
    assert (client.host, client.cert, client.key, client.ca, client.timeout) == (
        "https://example.com",
        "/missing.crt",
        "/missing.key",
        "/missing.ca",
        10,
    )
    client.timeout = None
    assert client.get_timeout() is None


@pytest.mark.parametrize(
    ("host", "path", "expected"),
    [
        ("http://example.com", "dir/file", "http://example.com/dir/file"),
        ("http://example.com", "/dir/file", "http://example.com/dir/file"),
        ("example.com", "file", "http://example.com/file"),
        (None, "example.com/file", "http://example.com/file"),
        (None, "https://example.com/file", "https://example.com/file"),
    ],
)
def test_url_resolution(host, path, expected):
    client, transport = make_client(host=host)
    client.get(path)
    assert transport.last.url == expected


def test_scheme_defaults_to_https_with_cert(tls_files):
    cert, key, _ = tls_files
    client, transport = make_client(host="example.com", cert=cert, key=key)
    client.get("secure")
    assert transport.last.url == "https://example.com/secure"


def test_header_precedence_and_persistence():
    client, transport = make_client()
    client.add_header("A", "1")
    client.add_header("C", "keep")
    client.get("http://x", {"A": "2", "B": "3"})

    sent = transport.last.headers
    assert sent["A"] == "2"
    assert sent["B"] == "3"
    assert sent["C"] == "keep"
    assert sent["User-Agent"] == "UA/1.0"

    client.get("http://x")
    assert transport.last.headers["A"] == "1"
    assert "B" not in transport.last.headers
    assert client.default_headers == {"A": "1", "C": "keep"}


def test_per_call_headers_override_case_insensitively():
    client, transport = make_client()
    client.add_header("Accept", "text/html")
    client.get("http://x", {"accept": "application/json"})
    assert transport.last.headers["accept"] == "application/json"
    assert "Accept" not in transport.last.headers


def test_content_length_reflects_body_bytes():
    client, transport = make_client()
    client.put("http://x", "hello")
    assert transport.last.headers["Content-Length"] == "5"
    assert transport.last.body == b"hello"

    client.post("http://x", "hé")
    assert transport.last.headers["Content-Length"] == "3"

    client.post("http://x", b"\x00\x01")
    assert transport.last.headers["Content-Length"] == "2"

    client.get("http://x")
    assert transport.last.headers["Content-Length"] == "0"
    assert transport.last.body is None

    client.put("http://x", "")
    assert transport.last.headers["Content-Length"] == "0"


def test_verbs_send_their_own_method():
    client, transport = make_client()
    client.get("http://x")
    client.put("http://x", "b")
    client.post("http://x", "b")
    client.delete("http://x")
    client.options("http://x")
    client.head("http://x")
    client.GET("http://x")
    client.POST("http://x")
    assert [r.method for r in transport.requests] == ["GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "GET", "POST"]


def test_request_normalizes_method_case_and_returns_client():
    client, transport = make_client()
    assert client.request("delete", "http://x") is client
    assert transport.last.method == "DELETE"
    assert client.get("http://x").response_code() == 200


def test_request_applies_timeout_and_redirect_settings():
    transport = RecordingTransport()
    client = RestClient(transport=transport, settings=HttpSettings(allow_redirects=False), timeout=2)
    client.get("http://x")
    assert transport.last.timeout == 2.0
    assert transport.last.allow_redirects is False

    client.set_timeout(None)
    client.get("http://x")
    assert transport.last.timeout is None


@pytest.mark.parametrize(
    ("method", "url", "headers"),
    [
        ("PATCH", "http://x", None),
        (None, "http://x", None),
        ("GET", "", None),
        ("GET", None, None),
        ("GET", "http://x", "not-a-map"),
        ("GET", "http://x", {"A": ["1"]}),
    ],
)
def test_request_validation_fails_before_io(method, url, headers):
    client, transport = make_client()
    with pytest.raises(InvalidArgumentError):
        client.request(method, url, None, headers)
    assert transport.requests == []


def test_unsupported_body_type_is_rejected():
    client, transport = make_client()
    with pytest.raises(InvalidArgumentError):
        client.put("http://x", {"json": "no"})
    assert transport.requests == []


def test_response_accessors_require_a_completed_request():
    client, _ = make_client()
    with pytest.raises(PreconditionFailedError):
        client.response_code()
    with pytest.raises(PreconditionFailedError):
        client.response_content()
    with pytest.raises(PreconditionFailedError):
        client.response_header("Content-Type")
    with pytest.raises(PreconditionFailedError):
        client.response_headers()


def test_response_accessors_after_request():
    client, _ = make_client()
    client.get("http://x")
    assert client.response_code() == 200
    assert client.response_content() == b"ok"
    assert client.response_text() == "ok"
    assert client.response_header("content-type") == "text/plain"
    assert client.response_header("X-Missing") is None
    assert client.response_headers() == {"Content-Type": "text/plain"}
    with pytest.raises(InvalidArgumentError):
        client.response_header("")

    client.add_header("X-After", "1")
    assert client.response_code() == 200


def test_last_response_tracks_only_latest_request():
    stub = StubTransport(
        {
            "http://x/a": HttpResponse(status_code=200, content=b"a"),
            "http://x/b": HttpResponse(status_code=404, content=b"b"),
        }
    )
    client = RestClient(transport=stub, host="http://x")
    client.get("a")
    assert client.response_code() == 200
    client.get("b")
    assert client.response_code() == 404
    assert client.response_content() == b"b"


def test_transport_failure_leaves_last_response_untouched():
    stub = StubTransport({"http://x/a": HttpResponse(status_code=200, content=b"a")})
    client = RestClient(transport=stub)
    client.get("http://x/a")

    with pytest.raises(TransportError) as excinfo:
        client.get("http://x/unreachable")

    assert excinfo.value.category is ErrorCategory.CONNECTION_ERROR
    assert client.response_code() == 200
    assert client.response_content() == b"a"


def test_missing_cert_fails_without_io(tmp_path):
    client, transport = make_client(cert=str(tmp_path / "missing.crt"), key=str(tmp_path / "missing.key"))
    with pytest.raises(PreconditionFailedError):
        client.get("https://example.com")
    assert transport.requests == []
    assert client.last_response is None


def test_cert_without_key_fails(tls_files):
    cert, _, _ = tls_files
    client, transport = make_client(cert=cert)
    with pytest.raises(PreconditionFailedError):
        client.get("https://example.com")
    assert transport.requests == []


def test_missing_ca_fails_without_io(tls_files, tmp_path):
    cert, key, _ = tls_files
    client, transport = make_client(cert=cert, key=key, ca=str(tmp_path / "missing-ca.pem"))
    with pytest.raises(PreconditionFailedError):
        client.get("https://example.com")
    assert transport.requests == []


def test_ca_is_ignored_without_cert(tmp_path):
    client, transport = make_client(ca=str(tmp_path / "missing-ca.pem"))
    client.get("https://example.com")
    assert transport.last.tls is None


def test_tls_material_is_attached_per_request(tls_files, monkeypatch):
    cert, key, ca = tls_files
    for name in ("HTTPS_CERT_FILE", "HTTPS_KEY_FILE", "HTTPS_CA_FILE"):
        monkeypatch.delenv(name, raising=False)

    client, transport = make_client(cert=cert, key=key, ca=ca)
    client.get("https://example.com")

    tls = transport.last.tls
    assert (tls.cert, tls.key, tls.ca) == (cert, key, ca)
    assert not any(name in os.environ for name in ("HTTPS_CERT_FILE", "HTTPS_KEY_FILE", "HTTPS_CA_FILE"))


def test_cert_over_plain_http_warns_but_proceeds(tls_files, caplog):
    cert, key, _ = tls_files
    client, transport = make_client(cert=cert, key=key)
    with caplog.at_level(logging.WARNING, logger="restclient.client"):
        client.get("http://example.com/plain")
    assert "not using https" in caplog.text
    assert transport.last.tls is not None
    assert client.response_code() == 200


def test_concurrent_clients_keep_their_own_tls_material(tmp_path):
    barrier = threading.Barrier(2, timeout=5)

    class OverlappingTransport(RecordingTransport):
        def request(self, request: HttpRequest) -> HttpResponse:
            barrier.wait()
            return super().request(request)

    clients = []
    for name in ("alpha", "beta"):
        cert = tmp_path / f"{name}.crt"
        key = tmp_path / f"{name}.key"
        cert.write_text(name)
        key.write_text(name)
        transport = OverlappingTransport()
        clients.append((RestClient(transport=transport, cert=str(cert), key=str(key)), transport, str(cert), str(key)))

    errors: list[BaseException] = []

    def run(client: RestClient) -> None:
        try:
            client.get("https://example.com/resource")
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=run, args=(client,)) for client, *_ in clients]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    for _, transport, cert, key in clients:
        assert len(transport.requests) == 1
        assert transport.last.tls.cert == cert
        assert transport.last.tls.key == key


def test_build_query_is_available_on_the_client():
    assert RestClient.build_query([["a", "1"], ["b", "c d"]]) == "a=1&b=c%20d"
    client, _ = make_client()
    assert client.build_query(a="1") == "a=1"


def test_response_xpath_parses_html_body():
    pytest.importorskip("lxml")
    body = b"<html><body><ul><li>one</li><li>two</li></ul></body></html>"
    transport = RecordingTransport(HttpResponse(status_code=200, content=body, text=body.decode()))
    client = RestClient(transport=transport)
    client.get("http://x")
    doc = client.response_xpath()
    assert doc.xpath("//li/text()") == ["one", "two"]


def test_response_xpath_rejects_empty_body():
    pytest.importorskip("lxml")
    transport = RecordingTransport(HttpResponse(status_code=204))
    client = RestClient(transport=transport)
    client.get("http://x")
    with pytest.raises(PreconditionFailedError):
        client.response_xpath()


class TestRestClientLifecycle(unittest.TestCase):
    def test_context_manager_closes_transport(self):
        transport = RecordingTransport()
        with RestClient(transport=transport) as client:
            client.get("http://x")
            self.assertFalse(transport.closed)
        self.assertTrue(transport.closed)

    def test_default_transport_is_created_lazily(self):
        client = RestClient()
        self.assertIsNone(client._transport)
        client.close()


if __name__ == "__main__":
    unittest.main()

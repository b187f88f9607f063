import httpx
import pytest
from fastapi.testclient import TestClient

from server import app, forwardable


def upstream(handler):
    return httpx.AsyncClient(base_url="http://upstream.test", transport=httpx.MockTransport(handler))


@pytest.fixture
def proxy():
    with TestClient(app) as client:
        yield client


def test_healthz(proxy):
    resp = proxy.get("/healthz")
    assert resp.status_code == 200
    assert resp.text == "ok"


def test_readyz_when_streamlit_is_up(proxy):
    app.state.upstream = upstream(lambda request: httpx.Response(200, text="ok"))
    assert proxy.get("/readyz").status_code == 200


def test_readyz_when_streamlit_is_down(proxy):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    app.state.upstream = upstream(refuse)
    assert proxy.get("/readyz").status_code == 503


def test_readyz_on_unhealthy_status(proxy):
    app.state.upstream = upstream(lambda request: httpx.Response(500))
    assert proxy.get("/readyz").status_code == 503


def test_http_requests_are_forwarded(proxy):
    seen = []

    def echo(request):
        seen.append(request)
        return httpx.Response(201, content=b"<html/>", headers={"content-type": "text/html", "x-upstream": "1"})

    app.state.upstream = upstream(echo)
    resp = proxy.post("/static/app.js?v=2", content=b"payload", headers={"x-custom": "yes"})

    assert resp.status_code == 201
    assert resp.content == b"<html/>"
    assert resp.headers["x-upstream"] == "1"
    assert seen[0].url.path == "/static/app.js"
    assert seen[0].url.query == b"v=2"
    assert seen[0].content == b"payload"
    assert seen[0].headers["x-custom"] == "yes"


def test_upstream_failure_is_bad_gateway(proxy):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    app.state.upstream = upstream(refuse)
    assert proxy.get("/anything").status_code == 502


def test_forwardable_drops_hop_by_hop_headers():
    headers = {"Host": "x", "Connection": "keep-alive", "Content-Length": "3", "Accept": "*/*"}
    assert forwardable(headers) == {"Accept": "*/*"}

# server.py
"""Front proxy for the Streamlit UI: health endpoints plus HTTP/WebSocket forwarding.

Run with ``uvicorn server:app`` next to ``streamlit run app.py``.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict

import httpx
import websockets
from fastapi import FastAPI, Request, Response, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse
from fastapi.websockets import WebSocketState

from turnover_predictor.config import APP_NAME, STREAMLIT_HOST, STREAMLIT_PORT, configure_logging

configure_logging()
logger = logging.getLogger("turnover_predictor.server")

UPSTREAM_HTTP = f"http://{STREAMLIT_HOST}:{STREAMLIT_PORT}"
UPSTREAM_WS = f"ws://{STREAMLIT_HOST}:{STREAMLIT_PORT}"

HOP_BY_HOP = {"host", "connection", "keep-alive", "proxy-authenticate", "proxy-authorization", "te",
              "trailers", "transfer-encoding", "upgrade", "content-length", "content-encoding"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with httpx.AsyncClient(base_url=UPSTREAM_HTTP, follow_redirects=True, timeout=None) as client:
        app.state.upstream = client
        yield


app = FastAPI(title=f"{APP_NAME} Proxy", lifespan=lifespan)


def forwardable(headers) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in HOP_BY_HOP}


@app.get("/healthz")
async def healthz():
    return PlainTextResponse("ok", status_code=200)


@app.get("/readyz")
async def readyz(request: Request):
    try:
        resp = await request.app.state.upstream.get("/_stcore/health")
    except httpx.HTTPError as exc:
        logger.warning("Upstream not ready: %s", exc)
        return PlainTextResponse("upstream unavailable", status_code=503)
    if not resp.is_success:
        return PlainTextResponse("upstream unavailable", status_code=503)
    return PlainTextResponse("ok", status_code=200)


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"])
async def proxy_http(request: Request, path: str):
    target = "/" + path
    if request.url.query:
        target += f"?{request.url.query}"
    try:
        upstream_resp = await request.app.state.upstream.request(
            request.method, target, headers=forwardable(request.headers), content=await request.body(),
        )
    except httpx.HTTPError as exc:
        logger.error("Proxy %s %s failed: %s", request.method, target, exc)
        return PlainTextResponse("Bad gateway", status_code=502)
    return Response(
        content=upstream_resp.content,
        status_code=upstream_resp.status_code,
        headers=forwardable(upstream_resp.headers),
        media_type=upstream_resp.headers.get("content-type"),
    )


async def _close(websocket: WebSocket, code: int = 1000) -> None:
    if WebSocketState.DISCONNECTED not in (websocket.client_state, websocket.application_state):
        await websocket.close(code=code)


async def _pump_client(websocket: WebSocket, upstream) -> None:
    try:
        while True:
            msg = await websocket.receive()
            if msg["type"] == "websocket.disconnect":
                break
            if msg.get("text") is not None:
                await upstream.send(msg["text"])
            elif msg.get("bytes") is not None:
                await upstream.send(msg["bytes"])
    except WebSocketDisconnect:
        pass
    finally:
        await upstream.close()


async def _pump_upstream(websocket: WebSocket, upstream) -> None:
    try:
        async for msg in upstream:
            if isinstance(msg, (bytes, bytearray)):
                await websocket.send_bytes(msg)
            else:
                await websocket.send_text(msg)
    except websockets.ConnectionClosed:
        pass
    finally:
        await _close(websocket)


@app.websocket("/{path:path}")
async def proxy_ws(websocket: WebSocket, path: str):
    # streamlit negotiates the "streamlit" subprotocol on /_stcore/stream
    subprotocols = websocket.scope.get("subprotocols") or []
    qs = websocket.url.query
    upstream_url = f"{UPSTREAM_WS}/{path}" + (f"?{qs}" if qs else "")
    try:
        async with websockets.connect(upstream_url, max_size=None, subprotocols=subprotocols or None) as upstream:
            await websocket.accept(subprotocol=upstream.subprotocol)
            await asyncio.gather(_pump_client(websocket, upstream), _pump_upstream(websocket, upstream))
    except (OSError, websockets.WebSocketException) as exc:
        logger.error("WebSocket proxy to %s failed: %s", upstream_url, exc)
        await _close(websocket, code=1011)

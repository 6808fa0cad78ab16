"""Link preview endpoints backing the link form."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from app.api.deps import get_microlink_client
from app.clients.microlink import MicrolinkClient
from app.preview.controller import ControllerDisposedError, PreviewFormController
from app.preview.render import FormRender
from app.schema.preview import PreviewRenderRead

logger = logging.getLogger("app.api.previews")

router = APIRouter()

# Strong references for fetch cycles that outlive their socket.
_inflight: set[asyncio.Task[None]] = set()


class _CollectingView:
    def __init__(self) -> None:
        self.renders: list[FormRender] = []

    def apply(self, render: FormRender) -> None:
        self.renders.append(render)


class _SocketView:
    """Buffers renders so the controller can write synchronously."""

    def __init__(self) -> None:
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def apply(self, render: FormRender) -> None:
        self.outbox.put_nowait(render.as_dict())


@router.get("/previews", response_model=PreviewRenderRead)
async def get_preview(
    url: str = Query(default=""),
    client: MicrolinkClient = Depends(get_microlink_client),
) -> PreviewRenderRead:
    """Run a single fetch cycle and return the final render."""
    view = _CollectingView()
    controller = PreviewFormController(client, view)
    controller.initialize()
    try:
        await controller.handle_change(url)
    finally:
        controller.dispose()
    return PreviewRenderRead.model_validate(view.renders[-1].as_dict())


async def _pump(websocket: WebSocket, outbox: asyncio.Queue[dict[str, Any]]) -> None:
    try:
        while True:
            await websocket.send_json(await outbox.get())
    except (WebSocketDisconnect, RuntimeError):
        logger.debug("Preview socket closed while sending")


async def _run_cycle(controller: PreviewFormController, url: str) -> None:
    try:
        await controller.handle_change(url)
    except ControllerDisposedError:
        logger.debug("Preview input arrived after the form detached")


@router.websocket("/previews/ws")
async def preview_socket(
    websocket: WebSocket,
    client: MicrolinkClient = Depends(get_microlink_client),
) -> None:
    """Each ``{"url": ...}`` message is an input change; every render is pushed back."""
    await websocket.accept()
    view = _SocketView()
    controller = PreviewFormController(client, view)
    controller.initialize()
    sender = asyncio.create_task(_pump(websocket, view.outbox))
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (KeyError, ValueError):
                # Binary frames carry no "text" key.
                view.outbox.put_nowait({"error": "message must be JSON text"})
                continue
            url = message.get("url") if isinstance(message, dict) else None
            if not isinstance(url, str):
                view.outbox.put_nowait({"error": 'expected {"url": <string>}'})
                continue
            task = asyncio.create_task(_run_cycle(controller, url))
            _inflight.add(task)
            task.add_done_callback(_inflight.discard)
    except WebSocketDisconnect:
        logger.info("Preview socket disconnected")
    finally:
        controller.dispose()
        sender.cancel()

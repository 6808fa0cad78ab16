"""Form controller that turns URL input changes into preview renders.

States move Idle -> Fetching -> Success/Failed and back through Idle on the
next input change. Each change opens a new fetch cycle with its own
generation number; results that come back for an older generation are
dropped, since the underlying request cannot be aborted.
"""

from __future__ import annotations

import logging
from typing import Protocol

from app.clients.microlink import MicrolinkResponse
from app.preview.render import FormRender, FormView, render
from app.preview.state import FETCH_ERROR_MESSAGE, PreviewState
from app.utils.redaction import redact_secrets

logger = logging.getLogger("app.preview.controller")


class ControllerDisposedError(RuntimeError):
    """Raised when input arrives for a controller that is not attached."""


class MetadataFetcher(Protocol):
    async def fetch(self, url: str) -> MicrolinkResponse: ...


def describe_error(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class PreviewFormController:
    """Owns PreviewState for one form and pushes every change to its view."""

    def __init__(self, client: MetadataFetcher, view: FormView | None = None, *, has_preview: bool = True) -> None:
        self._client = client
        self._view = view
        self._has_preview = has_preview
        self._generation = 0
        self._attachments = 0
        self._state: PreviewState | None = None

    @property
    def attached(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> PreviewState:
        if self._state is None:
            raise ControllerDisposedError("controller is not attached")
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def initialize(self) -> FormRender:
        self._generation = 0
        self._attachments += 1
        return self._commit(PreviewState.idle())

    def dispose(self) -> None:
        # Bumping the attachment count strands any in-flight fetch, even after
        # initialize() resets the generation counter.
        self._attachments += 1
        self._state = None
        logger.debug("Preview controller detached")

    async def handle_change(self, value: str) -> PreviewState:
        """Run one fetch cycle for the new input value."""
        if not self.attached:
            raise ControllerDisposedError("controller is not attached")

        self._generation += 1
        cycle = (self._attachments, self._generation)
        if value == "":
            self._commit(PreviewState.idle())
            return self.state

        # Clear before the network call so nothing stale stays visible.
        self._commit(PreviewState.fetching(value))
        try:
            response = await self._client.fetch(value)
        except Exception as exc:  # noqa: BLE001
            if self._is_stale(cycle, value):
                return self._state or PreviewState.idle()
            logger.warning("Preview fetch failed for %s: %s", redact_secrets(value), redact_secrets(describe_error(exc)))
            self._commit(PreviewState.failed(value, describe_error(exc)))
            return self.state

        if self._is_stale(cycle, value):
            return self._state or PreviewState.idle()
        if response.ok:
            self._commit(PreviewState.success(value, response.metadata))
        else:
            logger.info("Preview fetch for %s returned status %r", redact_secrets(value), response.status)
            self._commit(PreviewState.failed(value, FETCH_ERROR_MESSAGE))
        return self.state

    def _is_stale(self, cycle: tuple[int, int], value: str) -> bool:
        if cycle == (self._attachments, self._generation) and self.attached:
            return False
        logger.debug("Dropping stale preview result for %s (cycle %d)", redact_secrets(value), cycle[1])
        return True

    def _commit(self, state: PreviewState) -> FormRender:
        self._state = state
        output = render(state, has_preview=self._has_preview)
        if self._view is not None:
            self._view.apply(output)
        return output


__all__ = ["ControllerDisposedError", "MetadataFetcher", "PreviewFormController", "describe_error"]

"""RenderSession context manager: owns the Playwright browser for one run."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlsplit

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError

from svgreel.config import DEFAULT_SCALE, LOAD_TIMEOUT_MS
from svgreel.errors import SourceLoadError
from svgreel.models import Dimensions

logger = logging.getLogger(__name__)

_URL_SCHEMES = ("http", "https", "file")


def is_url(source: str) -> bool:
    return urlsplit(source).scheme.lower() in _URL_SCHEMES


def resolve_source_url(source: str) -> str:
    """Return *source* unchanged if it is a URL, else a ``file://`` URI for the local path."""
    if is_url(source):
        return source
    return Path(source).expanduser().resolve().as_uri()


class RenderSession:
    """Starts headless Chromium on enter and shuts it down on exit.

    Each :meth:`load` opens the source in a fresh browser context, closing
    the previous one, so the viewport and device scale factor can change
    between the dimension probe and the capture pass.

    Usage::

        with RenderSession(url, device_scale_factor=2) as session:
            page = session.load()
            page = session.load(viewport=Dimensions(400, 300))

    """

    def __init__(
        self,
        url: str,
        device_scale_factor: float = DEFAULT_SCALE,
        load_timeout_ms: int = LOAD_TIMEOUT_MS,
    ) -> None:
        self.url = url
        self.device_scale_factor = device_scale_factor
        self.load_timeout_ms = load_timeout_ms
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    def __enter__(self) -> "RenderSession":
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch()
        except PlaywrightError as exc:
            self._playwright.stop()
            self._playwright = None
            raise SourceLoadError(self.url, f"Could not launch Chromium: {exc}") from exc
        return self

    def __exit__(self, *_: object) -> None:
        try:
            self._close_context()
            if self._browser is not None:
                self._browser.close()
        finally:
            # Always stop the driver even if closing the browser raises.
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    def load(self, viewport: Dimensions | None = None) -> Page:
        """Open the source and wait for network idle.

        With *viewport* ``None`` the browser's default viewport is used (the
        dimension probe); otherwise the surface is sized to the ceil'd
        dimensions at this session's device scale factor.

        Raises
        ------
        SourceLoadError
            If navigation fails or the page does not reach network idle within
            the load timeout.
        """
        if self._browser is None:
            raise RuntimeError("RenderSession.load() called outside of a `with` block")

        self._close_context()
        try:
            if viewport is None:
                self._context = self._browser.new_context()
            else:
                self._context = self._browser.new_context(
                    viewport=viewport.viewport(),
                    device_scale_factor=self.device_scale_factor,
                )
            page = self._context.new_page()
            page.goto(self.url, wait_until="networkidle", timeout=self.load_timeout_ms)
        except PlaywrightError as exc:
            raise SourceLoadError(self.url, str(exc)) from exc

        logger.debug("Loaded %s (viewport=%s)", self.url, viewport.viewport() if viewport else "default")
        return page

    def _close_context(self) -> None:
        if self._context is not None:
            self._context.close()
            self._context = None

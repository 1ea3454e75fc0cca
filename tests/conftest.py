"""Shared fakes for the rendering engine.

FakePage answers the exact scripts the probe and capture modules send to
``page.evaluate`` so nothing here needs a real browser.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from playwright.sync_api import Error as PlaywrightError

from svgreel.capture.driver import PAINT_SCRIPT, SEEK_SCRIPT
from svgreel.probe.dimensions import SVG_SIZE_QUERY
from svgreel.probe.duration import TIMING_QUERY

PNG_STUB = b"\x89PNG\r\n\x1a\nfake"


def timing_query(
    primitives: list[dict[str, Any]] | None = None,
    keyframes: list[dict[str, Any]] | None = None,
    sheet_errors: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "primitives": primitives or [],
        "keyframes": keyframes or [],
        "sheetErrors": sheet_errors or [],
    }


class FakePage:
    def __init__(
        self,
        size_query: dict[str, Any] | None = None,
        timing: dict[str, Any] | None = None,
        fail_screenshot_at: int | None = None,
        url: str = "file:///tmp/anim.svg",
    ) -> None:
        self.url = url
        self.size_query = size_query
        self.timing = timing if timing is not None else timing_query()
        self.fail_screenshot_at = fail_screenshot_at
        self.calls: list[str] = []
        self.seeks: list[float] = []
        self.waits: list[int] = []
        self.screenshots: list[dict[str, Any]] = []

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        if expression == SVG_SIZE_QUERY:
            self.calls.append("size")
            return self.size_query
        if expression == TIMING_QUERY:
            self.calls.append("timing")
            return self.timing
        if expression == SEEK_SCRIPT:
            self.calls.append("seek")
            self.seeks.append(arg)
            return 1
        if expression == PAINT_SCRIPT:
            self.calls.append("paint")
            return True
        raise AssertionError(f"Unexpected script: {expression[:40]!r}")

    def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append("wait")
        self.waits.append(timeout)

    def screenshot(self, path: str, type: str = "png", omit_background: bool = False) -> bytes:
        if self.fail_screenshot_at is not None and len(self.screenshots) == self.fail_screenshot_at:
            raise PlaywrightError("Target page, context or browser has been closed")
        self.calls.append("screenshot")
        Path(path).write_bytes(PNG_STUB)
        self.screenshots.append({"path": path, "type": type, "omit_background": omit_background})
        return PNG_STUB


class FakeSession:
    """Stands in for RenderSession: patch it in place of the class and it returns itself."""

    def __init__(self, page: FakePage, load_error: Exception | None = None) -> None:
        self.page = page
        self.load_error = load_error
        self.url: str | None = None
        self.device_scale_factor: float | None = None
        self.loads: list[Any] = []
        self.closed = False

    def __call__(self, url: str, device_scale_factor: float = 1.0, **_: Any) -> "FakeSession":
        self.url = url
        self.device_scale_factor = device_scale_factor
        return self

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *_: object) -> None:
        self.closed = True

    def load(self, viewport: Any = None) -> FakePage:
        self.loads.append(viewport)
        if self.load_error is not None:
            raise self.load_error
        return self.page


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()

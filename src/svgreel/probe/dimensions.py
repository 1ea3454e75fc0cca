"""Intrinsic pixel size of the primary ``svg`` element.

Priority: ``viewBox`` > ``width``/``height`` attributes (percentages resolved
against the parent's rendered size) > rendered bounding box > 1280x720.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from svgreel.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from svgreel.errors import SourceLoadError
from svgreel.models import Dimensions
from svgreel.probe.timing import parse_number

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = Dimensions(width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT)

SVG_SIZE_QUERY = """
() => {
  const svg = document.querySelector('svg');
  if (!svg) return null;
  const parent = svg.parentElement;
  let bbox = null;
  try {
    const box = svg.getBBox();
    bbox = { width: box.width, height: box.height };
  } catch (e) {}
  return {
    viewBox: svg.getAttribute('viewBox'),
    width: svg.getAttribute('width'),
    height: svg.getAttribute('height'),
    parentWidth: parent ? parent.clientWidth : null,
    parentHeight: parent ? parent.clientHeight : null,
    bbox,
  };
}
"""

_VIEWBOX_SEPARATOR = re.compile(r"[\s,]+")


def _positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def parse_viewbox(value: str | None) -> tuple[float, float] | None:
    """Return ``(width, height)`` from a ``"min-x min-y width height"`` viewBox."""
    if not value:
        return None
    fields = _VIEWBOX_SEPARATOR.split(value.strip())
    if len(fields) != 4:
        return None
    try:
        _, _, width, height = (float(f) for f in fields)
    except ValueError:
        return None
    if _positive(width) and _positive(height):
        return width, height
    return None


def parse_length(value: str | None, parent_size: float | None) -> float | None:
    """Resolve a ``width``/``height`` attribute to pixels.

    ``"50%"`` resolves against *parent_size*; anything else is read as an
    absolute number (``"400"``, ``"400px"``).
    """
    if value is None:
        return None
    text = value.strip()
    number = parse_number(text)
    if number is None:
        return None
    if text.endswith("%"):
        if parent_size is None:
            return None
        return parent_size * number / 100.0
    return number


def dimensions_from_query(raw: dict[str, Any] | None) -> Dimensions:
    """Apply the resolution priority to the browser's SVG_SIZE_QUERY result."""
    if not raw:
        return DEFAULT_DIMENSIONS

    viewbox = parse_viewbox(raw.get("viewBox"))
    if viewbox is not None:
        return Dimensions(*viewbox)

    width = parse_length(raw.get("width"), raw.get("parentWidth"))
    height = parse_length(raw.get("height"), raw.get("parentHeight"))
    if _positive(width) and _positive(height):
        return Dimensions(width, height)

    bbox = raw.get("bbox") or {}
    bbox_width = bbox.get("width")
    bbox_height = bbox.get("height")
    if _positive(bbox_width) and _positive(bbox_height):
        return Dimensions(math.ceil(bbox_width), math.ceil(bbox_height))

    return DEFAULT_DIMENSIONS


def resolve_dimensions(page: Page) -> Dimensions:
    """Resolve the animated graphic's pixel size on the loaded *page*.

    Raises
    ------
    SourceLoadError
        If the document cannot be queried.
    """
    try:
        raw = page.evaluate(SVG_SIZE_QUERY)
    except PlaywrightError as exc:
        raise SourceLoadError(page.url, f"Dimension query failed: {exc}") from exc

    if raw is None:
        logger.warning("No <svg> element found; using default %dx%d", DEFAULT_WIDTH, DEFAULT_HEIGHT)

    dimensions = dimensions_from_query(raw)
    logger.info("Detected SVG dimensions: %gx%g", dimensions.width, dimensions.height)
    return dimensions

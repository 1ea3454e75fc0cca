"""Worst-case animation duration inference.

Reads two kinds of timing signal from the loaded document:
  1. Declarative SMIL primitives (``set``, ``animate``, ``animateTransform``,
     ``animateMotion``) and their ``dur`` / ``begin`` / ``repeatCount`` /
     ``repeatDur`` attributes.
  2. ``@keyframes`` rules, matched to elements whose inline style references
     the rule, using the computed ``animation-*`` longhands.

The browser only collects raw strings; all arithmetic runs here so the rules
can be exercised without a rendering engine.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from svgreel.config import DEFAULT_DURATION_MS, DEFAULT_REPEAT
from svgreel.errors import SourceLoadError
from svgreel.probe.timing import parse_repeat_count, parse_time_ms, split_css_list

logger = logging.getLogger(__name__)

TIMING_QUERY = """
() => {
  const primitives = Array.from(
    document.querySelectorAll('set, animate, animateTransform, animateMotion')
  ).map((el) => ({
    tag: el.tagName,
    dur: el.getAttribute('dur'),
    begin: el.getAttribute('begin'),
    repeatCount: el.getAttribute('repeatCount'),
    repeatDur: el.getAttribute('repeatDur'),
  }));

  const keyframes = [];
  const sheetErrors = [];
  Array.from(document.styleSheets).forEach((sheet, index) => {
    let rules;
    try {
      rules = Array.from(sheet.cssRules || sheet.rules || []);
    } catch (e) {
      sheetErrors.push(`${sheet.href || 'inline sheet #' + index}: ${e}`);
      return;
    }
    for (const rule of rules) {
      if (rule.type !== CSSRule.KEYFRAMES_RULE) continue;
      document.querySelectorAll('[style]').forEach((el) => {
        if (!(el.getAttribute('style') || '').includes(rule.name)) return;
        const style = window.getComputedStyle(el);
        keyframes.push({
          rule: rule.name,
          animationName: style.animationName,
          duration: style.animationDuration,
          delay: style.animationDelay,
          iterationCount: style.animationIterationCount,
        });
      });
    }
  });

  return { primitives, keyframes, sheetErrors };
}
"""


@dataclass
class PrimitiveTiming:
    """Raw timing attributes of one SMIL animation element."""

    tag: str
    dur: str | None = None
    begin: str | None = None
    repeat_count: str | None = None
    repeat_dur: str | None = None


@dataclass
class KeyframeUsage:
    """Computed animation longhands of one element using a ``@keyframes`` rule."""

    rule_name: str
    animation_name: str | None = None
    duration: str | None = None
    delay: str | None = None
    iteration_count: str | None = None


def primitive_duration_ms(primitive: PrimitiveTiming, repeat: int = DEFAULT_REPEAT) -> float:
    """Total active lifetime of a SMIL primitive in milliseconds.

    Priority: ``repeatDur`` wins outright; ``repeatCount="indefinite"`` counts
    as *repeat* iterations; a numeric ``repeatCount`` gives
    ``begin + dur * repeatCount``; otherwise ``dur + begin``. Unparsable
    ``dur`` and ``begin`` count as 0.
    """
    dur = parse_time_ms(primitive.dur) or 0.0
    begin = parse_time_ms(primitive.begin) or 0.0

    repeat_dur = parse_time_ms(primitive.repeat_dur)
    if repeat_dur:
        return repeat_dur

    if (primitive.repeat_count or "").strip() == "indefinite":
        return dur * repeat

    count = parse_repeat_count(primitive.repeat_count)
    if count is not None:
        return begin + dur * count

    return dur + begin


def _list_item(value: str | None, index: int) -> str | None:
    # CSS repeats shorter animation-* lists to match animation-name.
    items = split_css_list(value)
    if not items:
        return None
    return items[index % len(items)]


def keyframe_duration_ms(usage: KeyframeUsage, repeat: int = DEFAULT_REPEAT) -> float | None:
    """``duration * iterations + delay`` for one element's use of a keyframes rule.

    Returns ``None`` when the element's computed ``animation-name`` does not
    actually list the rule (its inline style only mentioned the name in
    passing).
    """
    names = split_css_list(usage.animation_name)
    if usage.rule_name not in names:
        return None
    index = names.index(usage.rule_name)

    duration = parse_time_ms(_list_item(usage.duration, index)) or 0.0
    delay = parse_time_ms(_list_item(usage.delay, index)) or 0.0

    iteration_raw = _list_item(usage.iteration_count, index)
    if iteration_raw == "infinite":
        iterations: float = repeat
    else:
        parsed = parse_repeat_count(iteration_raw)
        iterations = parsed if parsed is not None else 1.0

    return duration * iterations + delay


def compute_duration_ms(
    primitives: Iterable[PrimitiveTiming],
    keyframes: Iterable[KeyframeUsage],
    repeat: int = DEFAULT_REPEAT,
) -> float:
    """Maximum lifetime across all signals, or ``DEFAULT_DURATION_MS`` if none is usable."""
    candidates: list[float] = [primitive_duration_ms(p, repeat) for p in primitives]
    for usage in keyframes:
        total = keyframe_duration_ms(usage, repeat)
        if total is not None:
            candidates.append(total)

    finite = [c for c in candidates if math.isfinite(c)]
    longest = max(finite, default=0.0)
    if longest <= 0:
        return DEFAULT_DURATION_MS
    return longest


def parse_timing_query(raw: dict[str, Any]) -> tuple[list[PrimitiveTiming], list[KeyframeUsage], list[str]]:
    """Convert the browser's TIMING_QUERY result into typed records."""
    primitives = [
        PrimitiveTiming(
            tag=item.get("tag") or "",
            dur=item.get("dur"),
            begin=item.get("begin"),
            repeat_count=item.get("repeatCount"),
            repeat_dur=item.get("repeatDur"),
        )
        for item in raw.get("primitives") or []
    ]
    keyframes = [
        KeyframeUsage(
            rule_name=item.get("rule") or "",
            animation_name=item.get("animationName"),
            duration=item.get("duration"),
            delay=item.get("delay"),
            iteration_count=item.get("iterationCount"),
        )
        for item in raw.get("keyframes") or []
    ]
    sheet_errors = [str(e) for e in raw.get("sheetErrors") or []]
    return primitives, keyframes, sheet_errors


def infer_duration_ms(page: Page, repeat: int = DEFAULT_REPEAT) -> float:
    """Infer the worst-case total animation duration of the document on *page*.

    Style sheets whose rules cannot be enumerated are skipped with a warning;
    inference continues with the remaining signals.

    Raises
    ------
    SourceLoadError
        If the document cannot be queried at all (page crashed or navigated
        away).
    """
    try:
        raw = page.evaluate(TIMING_QUERY)
    except PlaywrightError as exc:
        raise SourceLoadError(page.url, f"Timing query failed: {exc}") from exc

    primitives, keyframes, sheet_errors = parse_timing_query(raw or {})
    for error in sheet_errors:
        logger.warning("Skipping unreadable style sheet during duration inference: %s", error)

    duration_ms = compute_duration_ms(primitives, keyframes, repeat)
    logger.info(
        "Detected animation duration: %.1fms (%d primitives, %d keyframe uses, repeat=%d)",
        duration_ms, len(primitives), len(keyframes), repeat,
    )
    return duration_ms

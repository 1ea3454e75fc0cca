"""Unit tests for the capture driver. No browser: FakePage records every call."""
from pathlib import Path

import pytest

from svgreel.capture.driver import capture_frames, prepare_scratch_dir, set_animation_time, settle
from svgreel.capture.schedule import build_schedule
from svgreel.errors import CaptureError

from conftest import FakePage


class TestSetAnimationTime:
    def test_passes_absolute_time(self, fake_page):
        set_animation_time(fake_page, 1234.5)
        assert fake_page.seeks == [1234.5]

    def test_one_script_call_per_seek(self, fake_page):
        set_animation_time(fake_page, 500)
        set_animation_time(fake_page, 100)
        assert fake_page.calls == ["seek", "seek"]
        assert fake_page.seeks == [500, 100]


class TestSettle:
    def test_waits_for_paint_then_delay(self, fake_page):
        settle(fake_page, 20)
        assert fake_page.calls == ["paint", "wait"]
        assert fake_page.waits == [20]

    def test_zero_delay_skips_timeout(self, fake_page):
        settle(fake_page, 0)
        assert fake_page.calls == ["paint"]


class TestPrepareScratchDir:
    def test_creates_directory(self, tmp_path: Path):
        scratch = tmp_path / "nested" / "frames"
        prepare_scratch_dir(scratch)
        assert scratch.is_dir()

    def test_removes_stale_frames_only(self, tmp_path: Path):
        (tmp_path / "frame-000007.png").write_bytes(b"old")
        (tmp_path / "notes.txt").write_text("keep")
        prepare_scratch_dir(tmp_path)
        assert not (tmp_path / "frame-000007.png").exists()
        assert (tmp_path / "notes.txt").exists()


class TestCaptureFrames:
    def test_one_frame_per_offset_in_order(self, tmp_path: Path, fake_page):
        schedule = build_schedule(1000, 10)
        frames = capture_frames(fake_page, schedule, tmp_path, settle_ms=0)

        assert len(frames) == 10
        assert [f.name for f in frames] == [f"frame-{i:06d}.png" for i in range(10)]
        assert all(f.exists() for f in frames)
        assert fake_page.seeks == list(schedule.offsets)

    def test_lexical_order_matches_temporal_order(self, tmp_path: Path, fake_page):
        frames = capture_frames(fake_page, build_schedule(2000, 6), tmp_path, settle_ms=0)
        assert sorted(frames, key=lambda p: p.name) == frames

    def test_seek_settle_screenshot_sequence(self, tmp_path: Path, fake_page):
        capture_frames(fake_page, build_schedule(100, 10), tmp_path, settle_ms=15)
        assert fake_page.calls == ["seek", "paint", "wait", "screenshot"]
        assert fake_page.waits == [15]

    def test_screenshots_keep_transparency(self, tmp_path: Path, fake_page):
        capture_frames(fake_page, build_schedule(300, 10), tmp_path, settle_ms=0)
        assert all(s["omit_background"] for s in fake_page.screenshots)
        assert all(s["type"] == "png" for s in fake_page.screenshots)

    def test_progress_is_monotonic(self, tmp_path: Path, fake_page):
        seen: list[tuple[int, int]] = []
        capture_frames(
            fake_page, build_schedule(500, 10), tmp_path, settle_ms=0,
            progress_callback=lambda done, total: seen.append((done, total)),
        )
        assert seen == [(i, 5) for i in range(1, 6)]

    def test_failure_is_fatal_and_not_retried(self, tmp_path: Path):
        page = FakePage(fail_screenshot_at=3)
        with pytest.raises(CaptureError) as exc_info:
            capture_frames(page, build_schedule(1000, 10), tmp_path, settle_ms=0)

        assert exc_info.value.frame_index == 3
        assert exc_info.value.offset_ms == pytest.approx(300.0)
        assert len(page.seeks) == 4
        assert len(list(tmp_path.glob("frame-*.png"))) == 3

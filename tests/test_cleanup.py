"""Unit tests for scratch cleanup: complete, idempotent, never raising."""
from pathlib import Path

from svgreel.cleanup import cleanup_artifacts


def _populate(scratch: Path, count: int = 5) -> list[Path]:
    scratch.mkdir(parents=True, exist_ok=True)
    frames = []
    for i in range(count):
        frame = scratch / f"frame-{i:06d}.png"
        frame.write_bytes(b"png")
        frames.append(frame)
    return frames


class TestCleanupArtifacts:
    def test_removes_frames_and_directory(self, tmp_path):
        scratch = tmp_path / "frames"
        frames = _populate(scratch)
        cleanup_artifacts(scratch, frames)
        assert not any(f.exists() for f in frames)
        assert not scratch.exists()

    def test_removes_unlisted_frames(self, tmp_path):
        """A capture that failed midway never handed back its frame list."""
        scratch = tmp_path / "frames"
        _populate(scratch, 3)
        cleanup_artifacts(scratch)
        assert not scratch.exists()

    def test_already_deleted_frame_is_ignored(self, tmp_path):
        scratch = tmp_path / "frames"
        frames = _populate(scratch)
        frames[2].unlink()
        cleanup_artifacts(scratch, frames)
        assert not scratch.exists()

    def test_idempotent(self, tmp_path):
        scratch = tmp_path / "frames"
        frames = _populate(scratch)
        cleanup_artifacts(scratch, frames)
        cleanup_artifacts(scratch, frames)
        assert not scratch.exists()

    def test_missing_directory_is_noop(self, tmp_path):
        cleanup_artifacts(tmp_path / "never-created", [tmp_path / "never-created" / "frame-000000.png"])

    def test_foreign_file_keeps_directory_without_raising(self, tmp_path, caplog):
        scratch = tmp_path / "frames"
        frames = _populate(scratch)
        (scratch / "keep.txt").write_text("not ours")
        cleanup_artifacts(scratch, frames)
        assert not any(f.exists() for f in frames)
        assert scratch.exists()
        assert "Could not remove scratch directory" in caplog.text

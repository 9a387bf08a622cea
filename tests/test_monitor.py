import logging
import os
from pathlib import Path

import pytest

from clipshot.clipboard.screenshots import ScreenshotFolderSource
from clipshot.delivery.base import DeliverySink
from clipshot.delivery.local import LocalSink
from clipshot.models.delivery import DeliveryResult, DeliveryTarget
from clipshot.services.change_detector import fingerprint
from clipshot.services.monitor import MonitorService, unique_filename

IMAGE_A = b"A" * 10 * 1024
IMAGE_B = b"B" * 20 * 1024


class RecordingSink(DeliverySink):

    def __init__(self, results=()):
        self.results = list(results)
        self.calls = []

    def deliver(self, payload, filename):
        self.calls.append((payload, filename))
        outcome = self.results.pop(0) if self.results else True
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is True:
            return DeliveryResult(success=True, path=f"/home/me/clipshot-screenshots/{filename}")
        return outcome


def _filenames():
    counter = iter(range(1, 100))
    return lambda: f"screenshot-{next(counter)}.png"


@pytest.fixture
def logs(caplog):
    caplog.set_level(logging.DEBUG, logger="clipshot")
    return caplog


def _messages(caplog, level=logging.INFO):
    return [r.getMessage() for r in caplog.records if r.levelno == level]


def test_local_end_to_end(tmp_path, fake_clipboard, logs):
    clipboard = fake_clipboard([None, IMAGE_A, IMAGE_A, IMAGE_B])
    monitor = MonitorService(
        DeliveryTarget.parse("local"),
        LocalSink(tmp_path),
        clipboard,
        filename_factory=_filenames(),
    )
    monitor.prime()

    first = monitor.tick()
    assert len(first) == 1
    assert Path(first[0].path) == tmp_path / "screenshot-1.png"
    assert (tmp_path / "screenshot-1.png").read_bytes() == IMAGE_A
    assert clipboard.writes == [str(tmp_path / "screenshot-1.png")]
    assert _messages(logs) == [
        "New screenshot: screenshot-1.png (10KB)",
        f"  -> Saved: {tmp_path / 'screenshot-1.png'}",
        "  -> Copied to clipboard",
    ]

    assert monitor.tick() == []
    assert len(clipboard.writes) == 1

    third = monitor.tick()
    assert Path(third[0].path) == tmp_path / "screenshot-2.png"
    assert (tmp_path / "screenshot-2.png").read_bytes() == IMAGE_B
    assert clipboard.writes[-1] == str(tmp_path / "screenshot-2.png")
    assert "New screenshot: screenshot-2.png (20KB)" in _messages(logs)


def test_image_present_at_startup_is_not_delivered(fake_clipboard):
    clipboard = fake_clipboard([IMAGE_A, IMAGE_A])
    sink = RecordingSink()
    monitor = MonitorService(DeliveryTarget.parse("local"), sink, clipboard)

    monitor.prime()
    assert monitor.tick() == []
    assert sink.calls == []


def test_failed_remote_delivery_is_logged_and_not_retried(fake_clipboard, logs):
    clipboard = fake_clipboard([None, IMAGE_A, IMAGE_A])
    failure = DeliveryResult(
        success=False,
        path="/root/clipshot-screenshots/screenshot-1.png",
        error="ssh exited with status 1",
    )
    sink = RecordingSink([failure])
    monitor = MonitorService(
        DeliveryTarget.parse("root@buildbox"), sink, clipboard, filename_factory=_filenames())
    monitor.prime()

    assert monitor.tick() == [failure]
    assert clipboard.writes == []
    errors = _messages(logs, logging.ERROR)
    assert errors == ["  -> Failed to send to root@buildbox: ssh exited with status 1"]
    assert monitor.detectors[0].state.fingerprint == fingerprint(IMAGE_A)

    assert monitor.tick() == []
    assert len(sink.calls) == 1


def test_remote_success_logs_target_and_path(fake_clipboard, logs):
    clipboard = fake_clipboard([None, IMAGE_A])
    monitor = MonitorService(
        DeliveryTarget.parse("me@box"), RecordingSink(), clipboard, filename_factory=_filenames())
    monitor.prime()
    monitor.tick()

    assert "  -> Sent to me@box:/home/me/clipshot-screenshots/screenshot-1.png" in _messages(logs)
    assert clipboard.writes == ["/home/me/clipshot-screenshots/screenshot-1.png"]


def test_clipboard_write_failure_does_not_fail_delivery(fake_clipboard, logs):
    clipboard = fake_clipboard([None, IMAGE_A], write_ok=False)
    monitor = MonitorService(DeliveryTarget.parse("me@box"), RecordingSink(), clipboard)
    monitor.prime()

    results = monitor.tick()

    assert results[0].success
    assert "  -> Copied to clipboard" not in _messages(logs)


def test_screenshot_folder_is_an_independent_channel(tmp_path, fake_clipboard):
    folder = tmp_path / "Desktop"
    folder.mkdir()
    shot = folder / "Screenshot.png"
    shot.write_bytes(IMAGE_B)
    os.utime(shot, (1000.0, 1000.0))
    screenshots = ScreenshotFolderSource(folder, clock=lambda: 2000.0)

    clipboard = fake_clipboard([IMAGE_A, IMAGE_A, IMAGE_A, IMAGE_A])
    sink = RecordingSink()
    monitor = MonitorService(
        DeliveryTarget.parse("local"), sink, clipboard, screenshots=screenshots)
    monitor.prime()
    assert monitor.tick() == []

    newer = folder / "Screenshot 2.png"
    newer.write_bytes(b"C" * 2048)
    os.utime(newer, (1500.0, 1500.0))

    assert len(monitor.tick()) == 1
    assert sink.calls[0][0] == b"C" * 2048
    # The clipboard image must not look new just because another channel delivered.
    assert monitor.tick() == []


def test_images_from_both_channels_in_one_tick_get_distinct_files(tmp_path, fake_clipboard):
    folder = tmp_path / "Desktop"
    folder.mkdir()
    shots = tmp_path / "shots"
    screenshots = ScreenshotFolderSource(folder, clock=lambda: 2000.0)
    clipboard = fake_clipboard([None, IMAGE_A])
    monitor = MonitorService(
        DeliveryTarget.parse("local"),
        LocalSink(shots),
        clipboard,
        screenshots=screenshots,
        filename_factory=lambda: "screenshot-2026-10-18T04-14-20.png",
    )
    monitor.prime()

    shot = folder / "Screenshot.png"
    shot.write_bytes(IMAGE_B)
    os.utime(shot, (1500.0, 1500.0))

    results = monitor.tick()

    assert [Path(r.path).name for r in results] == [
        "screenshot-2026-10-18T04-14-20.png",
        "screenshot-2026-10-18T04-14-20-2.png",
    ]
    assert (shots / "screenshot-2026-10-18T04-14-20.png").read_bytes() == IMAGE_A
    assert (shots / "screenshot-2026-10-18T04-14-20-2.png").read_bytes() == IMAGE_B


@pytest.mark.parametrize("taken, expected", [
    ((), "screenshot-1.png"),
    (("screenshot-1.png",), "screenshot-1-2.png"),
    (("screenshot-1.png", "screenshot-1-2.png"), "screenshot-1-3.png"),
])
def test_unique_filename(taken, expected):
    assert unique_filename("screenshot-1.png", taken) == expected

def test_run_forever_survives_tick_errors(fake_clipboard, logs):
    clipboard = fake_clipboard([None, IMAGE_A, IMAGE_B])
    monitor = None

    class StoppingSink(RecordingSink):
        def deliver(self, payload, filename):
            result = super().deliver(payload, filename)
            if len(self.calls) == 2:
                monitor.stop()
            return result

    sink = StoppingSink([RuntimeError("disk on fire"), True])
    monitor = MonitorService(DeliveryTarget.parse("local"), sink, clipboard, poll_interval=0)

    monitor.run_forever()

    assert monitor.is_stopped
    assert [payload for payload, _ in sink.calls] == [IMAGE_A, IMAGE_B]
    assert "Error: disk on fire" in _messages(logs, logging.ERROR)


def test_missing_tools_warned_at_startup(fake_clipboard, logs, monkeypatch):
    clipboard = fake_clipboard()
    monkeypatch.setattr(clipboard, "missing_tools", lambda: ["pngpaste"])
    monitor = MonitorService(DeliveryTarget.parse("local"), RecordingSink(), clipboard)

    monitor.warn_missing_tools()

    assert _messages(logs, logging.WARNING) == [
        "Warning: pngpaste not found; clipboard access will be limited"]

from clipshot.models.state import LastSeenState
from clipshot.services.change_detector import ChangeDetector, fingerprint


def test_fingerprint_is_128_bit_hex():
    digest = fingerprint(b"png bytes")
    assert len(digest) == 32
    assert digest == fingerprint(b"png bytes")
    assert digest != fingerprint(b"png bytes!")


def test_identical_content_is_delivered_once():
    detector = ChangeDetector()
    assert detector.should_deliver(b"first")
    assert not detector.should_deliver(b"first")
    assert not detector.should_deliver(b"first")


def test_new_content_is_delivered_and_old_content_again_after_it():
    detector = ChangeDetector()
    assert detector.should_deliver(b"first")
    assert detector.should_deliver(b"second")
    assert not detector.should_deliver(b"second")
    assert detector.should_deliver(b"first")


def test_empty_or_missing_payload_is_never_new():
    detector = ChangeDetector()
    assert not detector.should_deliver(None)
    assert not detector.should_deliver(b"")
    assert detector.state.fingerprint is None


def test_seed_suppresses_startup_content():
    state = LastSeenState()
    detector = ChangeDetector(state)
    detector.seed(b"already there")
    assert state.fingerprint == fingerprint(b"already there")
    assert not detector.should_deliver(b"already there")
    assert detector.should_deliver(b"fresh")


def test_fingerprint_recorded_before_delivery():
    state = LastSeenState()
    ChangeDetector(state).should_deliver(b"image")
    assert state.fingerprint == fingerprint(b"image")

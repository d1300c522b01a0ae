#!/usr/bin/env python3

"""
Unit tests for the per-medium pause detectors.
"""

# Standard Library
import os
import sys
from fractions import Fraction

import pytest

TESTS_DIR = os.path.abspath(os.path.dirname(__file__))
if TESTS_DIR not in sys.path:
	sys.path.insert(0, TESTS_DIR)
import fake_media

# local repo modules
from chapterscanlib.core.errors import ContractViolation
from chapterscanlib.detect.events import NO_PAUSE
from chapterscanlib.detect.events import PauseEvent
from chapterscanlib.detect.pause_detector import PacketOutcome

UNTIL = Fraction(60)

#============================================

def _events(detector, stream_index: int, packet: dict, until=UNTIL) -> tuple:
	outcome, events = detector.process_packet(stream_index, packet, until)
	return (outcome, list(events))

#============================================

def test_silence_start_and_end() -> None:
	silence, _ = fake_media.make_detectors()
	outcome, events = _events(silence, fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.frame(4000), fake_media.silence_start(5000)))
	assert outcome is PacketOutcome.DECODED
	assert events == [NO_PAUSE, PauseEvent.start(5)]
	assert silence.inside_pause
	outcome, events = _events(silence, fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.silence_end(8000)))
	assert events == [PauseEvent.end(8)]
	assert not silence.inside_pause

#============================================

def test_blank_tags_use_frame_timestamp() -> None:
	_, blank = fake_media.make_detectors()
	_, events = _events(blank, fake_media.VIDEO_INDEX,
		fake_media.packet(fake_media.black_start(6040), fake_media.black_end(9000)))
	assert events == [PauseEvent.start(Fraction("6.04")), PauseEvent.end(9)]

#============================================

def test_foreign_stream_is_not_applicable() -> None:
	silence, _ = fake_media.make_detectors()
	packet = fake_media.packet(fake_media.silence_start(1000))
	outcome, events = _events(silence, fake_media.VIDEO_INDEX, packet)
	assert outcome is PacketOutcome.NOT_APPLICABLE
	assert events == []
	assert not silence.inside_pause
	assert not silence.at_end
	assert silence.engine.decoded == []

#============================================

def test_horizon_marks_at_end() -> None:
	silence, _ = fake_media.make_detectors()
	_events(silence, fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.frame(59999)))
	assert not silence.at_end
	_events(silence, fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.frame(60000)))
	assert silence.at_end
	assert silence.position == 60

#============================================

def test_finished_detector_is_noop() -> None:
	silence, _ = fake_media.make_detectors()
	packet = fake_media.packet(fake_media.silence_start(61000))
	outcome, events = _events(silence, fake_media.AUDIO_INDEX, packet)
	assert outcome is PacketOutcome.DECODED
	assert silence.at_end
	assert silence.inside_pause
	decoded_count = len(silence.engine.decoded)
	outcome, events = _events(silence, fake_media.AUDIO_INDEX, packet)
	assert outcome is PacketOutcome.FINISHED
	assert events == []
	assert silence.inside_pause
	assert len(silence.engine.decoded) == decoded_count

#============================================

def test_filter_fan_out_yields_each_frame() -> None:
	"""
	One decoded frame can release several buffered filter frames.
	"""
	_, blank = fake_media.make_detectors()
	decoded = fake_media.frame(3000)
	decoded['filtered'] = [
		fake_media.frame(2900),
		fake_media.black_start(2950),
		fake_media.frame(3000),
	]
	_, events = _events(blank, fake_media.VIDEO_INDEX, fake_media.packet(decoded))
	assert events == [NO_PAUSE, PauseEvent.start(Fraction("2.95")), NO_PAUSE]

#============================================

def test_filter_may_hold_frames_back() -> None:
	_, blank = fake_media.make_detectors()
	decoded = fake_media.frame(3000)
	decoded['filtered'] = []
	outcome, events = _events(blank, fake_media.VIDEO_INDEX, fake_media.packet(decoded))
	assert outcome is PacketOutcome.DECODED
	assert events == []
	assert blank.position == 3

#============================================

def test_short_run_with_both_tags_is_ignored() -> None:
	silence, _ = fake_media.make_detectors()
	tags = {'lavfi.silence_start': '1.0', 'lavfi.silence_duration': '0.1'}
	_, events = _events(silence, fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.frame(1100, tags)))
	assert events == [NO_PAUSE]
	assert not silence.inside_pause

#============================================

def test_end_outside_pause_is_violation() -> None:
	_, blank = fake_media.make_detectors()
	with pytest.raises(ContractViolation):
		_events(blank, fake_media.VIDEO_INDEX, fake_media.packet(fake_media.black_end(2000)))

#============================================

def test_second_start_is_violation() -> None:
	silence, _ = fake_media.make_detectors()
	_events(silence, fake_media.AUDIO_INDEX, fake_media.packet(fake_media.silence_start(1000)))
	with pytest.raises(ContractViolation):
		_events(silence, fake_media.AUDIO_INDEX,
			fake_media.packet(fake_media.silence_start(2000)))

#============================================

def test_tag_without_timestamp_is_violation() -> None:
	silence, _ = fake_media.make_detectors()
	untimed = fake_media.silence_start(1000)
	untimed['pts'] = None
	with pytest.raises(ContractViolation):
		_events(silence, fake_media.AUDIO_INDEX, fake_media.packet(untimed))

#============================================

def test_events_are_lazy() -> None:
	silence, _ = fake_media.make_detectors()
	outcome, events = silence.process_packet(fake_media.AUDIO_INDEX,
		fake_media.packet(fake_media.silence_start(70000)), UNTIL)
	assert outcome is PacketOutcome.DECODED
	assert silence.engine.decoded == []
	assert not silence.at_end
	assert list(events) == [PauseEvent.start(70)]
	assert silence.at_end
	assert list(events) == []

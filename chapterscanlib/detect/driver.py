#!/usr/bin/env python3

"""
Single pass over interleaved packets that feeds both pause detectors and
correlates their events into candidates.
"""

# Standard Library
from fractions import Fraction

# local repo modules
from chapterscanlib.core import utils
from chapterscanlib.core.progress import ProgressSink
from chapterscanlib.detect.completion import StreamCompletion
from chapterscanlib.detect.correlator import CandidateCorrelator
from chapterscanlib.detect.pause_detector import PacketOutcome

#============================================

class DetectionDriver():
	def __init__(self, audio_detector, video_detector, threshold: Fraction,
		progress: ProgressSink = None):
		self.audio = audio_detector
		self.video = video_detector
		self.progress = progress if progress is not None else ProgressSink()
		self.correlator = CandidateCorrelator(threshold, on_overlap=self._report_overlap)
		self.completion = StreamCompletion()
		self.packet_count = 0

	#============================
	def __repr__(self) -> str:
		return (f"DetectionDriver(audio_stream={self.audio.stream_index}, "
			f"video_stream={self.video.stream_index})")

	#============================
	def _report_overlap(self, offset: Fraction, length: Fraction) -> None:
		self.progress.message(f"quiet blackness at {utils.format_duration(offset)}")

	#============================
	def _feed_detector(self, detector, stream_index: int, packet, until: Fraction) -> None:
		outcome, events = detector.process_packet(stream_index, packet, until)
		if outcome is not PacketOutcome.DECODED:
			return
		for event in events:
			self.correlator.feed(detector.medium, event)
		if detector is self.video and detector.position is not None:
			self.progress.update(utils.seconds_to_millis(detector.position))
		if detector.at_end:
			self.completion.mark_done(detector.medium)

	#============================
	def detect(self, packets, until) -> list:
		"""
		Scan packets until both media pass the horizon or packets run out.

		Args:
			packets: Iterable of (stream_index, packet) pairs in container order.
			until: Scan horizon in seconds.

		Returns:
			list: Candidates in the order their closing end event arrived.
		"""
		until = Fraction(until)
		for stream_index, packet in packets:
			self.packet_count += 1
			self._feed_detector(self.audio, stream_index, packet, until)
			self._feed_detector(self.video, stream_index, packet, until)
			if self.completion.is_all_done():
				break
		return list(self.correlator.candidates)

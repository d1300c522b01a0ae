#!/usr/bin/env python3

"""
Per-medium pause detectors.

A detector owns one stream index and one decode+filter engine. For every
packet of its stream it decodes, pushes the decoded frames through the
signal-detection filter, and turns the run-start / run-end tags on the
filtered frames into PauseEvent values. One packet may produce any number of
filtered frames, so events are yielded lazily and the caller drains them.

Engine interface:
	time_base: seconds per timestamp unit.
	decode(packet) -> iterable of decoded frames.
	filter(frame) -> iterable of filtered frames.
	frame_time(frame) -> Fraction seconds or None.
	frame_tags(frame) -> mapping of metadata tags.
"""

# Standard Library
import enum
from fractions import Fraction

# local repo modules
from chapterscanlib.core.errors import ContractViolation
from chapterscanlib.detect.events import Medium
from chapterscanlib.detect.events import NO_PAUSE
from chapterscanlib.detect.events import PauseEvent

#============================================

class PacketOutcome(enum.Enum):
	NOT_APPLICABLE = 'not_applicable'
	FINISHED = 'finished'
	DECODED = 'decoded'

#============================================

class PauseDetector():
	medium = None
	start_tag = None
	end_tag = None

	def __init__(self, stream_index: int, engine):
		self.stream_index = stream_index
		self.engine = engine
		self.time_base = engine.time_base
		self.inside_pause = False
		self.at_end = False
		self.position = None

	#============================
	def __repr__(self) -> str:
		return (f"{type(self).__name__}(stream={self.stream_index}, "
			f"inside_pause={self.inside_pause}, at_end={self.at_end})")

	#============================
	def is_applicable_stream(self, stream_index: int) -> bool:
		return stream_index == self.stream_index

	#============================
	def process_packet(self, stream_index: int, packet, until: Fraction) -> tuple:
		"""
		Offer one demuxed packet to this detector.

		Args:
			stream_index: Index of the stream the packet belongs to.
			packet: The packet, passed through to the engine.
			until: Scan horizon in seconds.

		Returns:
			tuple: (PacketOutcome, iterator of PauseEvent). The iterator is
			empty unless the outcome is DECODED.
		"""
		if not self.is_applicable_stream(stream_index):
			return (PacketOutcome.NOT_APPLICABLE, iter(()))
		if self.at_end:
			return (PacketOutcome.FINISHED, iter(()))
		return (PacketOutcome.DECODED, self._pauses_from_packet(packet, Fraction(until)))

	#============================
	def _pauses_from_packet(self, packet, until: Fraction):
		for frame in self.engine.decode(packet):
			at_ts = self.engine.frame_time(frame)
			if at_ts is not None:
				self.position = at_ts
				if at_ts >= until:
					self.at_end = True
			for filtered in self.engine.filter(frame):
				yield self.frame_matches(filtered)

	#============================
	def frame_matches(self, frame) -> PauseEvent:
		"""
		Classify one filtered frame's run tags.
		"""
		tags = self.engine.frame_tags(frame)
		has_start = self.start_tag in tags
		has_end = self.end_tag in tags
		if not has_start and not has_end:
			return NO_PAUSE
		if has_start and has_end:
			# run shorter than the filter's own minimum
			return NO_PAUSE
		timestamp = self.engine.frame_time(frame)
		if has_end and self.inside_pause and timestamp is not None:
			self.inside_pause = False
			return PauseEvent.end(timestamp)
		if has_start and not self.inside_pause and timestamp is not None:
			self.inside_pause = True
			return PauseEvent.start(timestamp)
		tag = self.start_tag if has_start else self.end_tag
		raise ContractViolation(
			f"unclear combination of {self.medium.value} tags: {tag} with "
			f"inside_pause={self.inside_pause} at timestamp {timestamp}"
		)

#============================================

class SilenceDetector(PauseDetector):
	medium = Medium.AUDIO
	start_tag = 'lavfi.silence_start'
	end_tag = 'lavfi.silence_duration'

#============================================

class BlankDetector(PauseDetector):
	medium = Medium.VIDEO
	start_tag = 'lavfi.black_start'
	end_tag = 'lavfi.black_end'

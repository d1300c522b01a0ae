#!/usr/bin/env python3

"""
Merge audio silence runs and video blank runs into candidates.

The two media tick on independent clocks and arrive in container order, so
the correlator keeps one pause start per medium and reacts to each event as
it comes rather than merging two sorted streams.
"""

# Standard Library
import dataclasses
from fractions import Fraction

# local repo modules
from chapterscanlib.core.errors import ContractViolation
from chapterscanlib.detect.events import Candidate
from chapterscanlib.detect.events import Medium
from chapterscanlib.detect.events import PauseEvent
from chapterscanlib.detect.events import PauseKind

#============================================

@dataclasses.dataclass(frozen=True)
class CorrelationState:
	"""
	Pause start per medium; None means that medium is not paused.

	The four combinations are the Idle, Audio, Video and Both states.
	"""
	audio: Fraction = None
	video: Fraction = None

	#============================
	@property
	def kind(self) -> str:
		if self.audio is None and self.video is None:
			return 'idle'
		if self.audio is None:
			return 'video'
		if self.video is None:
			return 'audio'
		return 'both'

	#============================
	def since(self, medium: Medium) -> Fraction:
		if medium is Medium.AUDIO:
			return self.audio
		return self.video

	#============================
	def with_pause(self, medium: Medium, since: Fraction) -> 'CorrelationState':
		return dataclasses.replace(self, **{medium.value: since})

IDLE = CorrelationState()

#============================================

class CandidateCorrelator():
	def __init__(self, threshold: Fraction, on_overlap=None):
		"""
		Args:
			threshold: Candidates must be strictly longer than this.
			on_overlap: Optional callable(offset, length) invoked for every
				closed overlap, including ones below the threshold.
		"""
		self.threshold = Fraction(threshold)
		self.on_overlap = on_overlap
		self.state = IDLE
		self.candidates = []

	#============================
	def feed(self, medium: Medium, event: PauseEvent) -> Candidate:
		"""
		Apply one pause event from one medium.

		Returns:
			Candidate: The emitted candidate, or None.
		"""
		if event.kind is PauseKind.NONE:
			return None
		own_since = self.state.since(medium)
		if event.kind is PauseKind.START:
			if own_since is not None:
				raise ContractViolation(
					f"{medium.value} pause started at {event.at} while already "
					f"paused since {own_since} (state {self.state.kind})"
				)
			self.state = self.state.with_pause(medium, event.at)
			return None
		if own_since is None:
			raise ContractViolation(
				f"{medium.value} pause ended at {event.at} without a start "
				f"(state {self.state.kind})"
			)
		other_since = self.state.since(medium.other)
		self.state = self.state.with_pause(medium, None)
		if other_since is None:
			return None
		offset = max(own_since, other_since)
		length = event.at - own_since
		if self.on_overlap is not None:
			self.on_overlap(offset, length)
		if length > self.threshold:
			candidate = Candidate(offset, length)
			self.candidates.append(candidate)
			return candidate
		return None

#!/usr/bin/env python3

"""
Value types shared by the pause detectors, the correlator and the driver.
"""

# Standard Library
import dataclasses
import enum
from fractions import Fraction

# local repo modules
from chapterscanlib.core import utils

#============================================

class Medium(enum.Enum):
	AUDIO = 'audio'
	VIDEO = 'video'

	#============================
	@property
	def other(self) -> 'Medium':
		if self is Medium.AUDIO:
			return Medium.VIDEO
		return Medium.AUDIO

#============================================

class PauseKind(enum.Enum):
	NONE = 'none'
	START = 'start'
	END = 'end'

#============================================

@dataclasses.dataclass(frozen=True)
class PauseEvent:
	"""
	Pause signal for one filtered frame: nothing, a run start or a run end.
	"""
	kind: PauseKind
	at: Fraction = None

	#============================
	@classmethod
	def start(cls, at: Fraction) -> 'PauseEvent':
		return cls(PauseKind.START, Fraction(at))

	#============================
	@classmethod
	def end(cls, at: Fraction) -> 'PauseEvent':
		return cls(PauseKind.END, Fraction(at))

	#============================
	def __str__(self) -> str:
		if self.kind is PauseKind.NONE:
			return "none"
		return f"{self.kind.value}@{utils.format_duration(self.at)}"

NO_PAUSE = PauseEvent(PauseKind.NONE)

#============================================

@dataclasses.dataclass(frozen=True)
class Candidate:
	"""
	A spot with both a blank screen and a silence.

	offset is the later of the two run starts; length is the run of the
	medium whose end closed the overlap, measured from its own start.
	"""
	offset: Fraction
	length: Fraction

	#============================
	def __str__(self) -> str:
		offset_text = utils.format_duration(self.offset)
		length_text = utils.format_duration(self.length)
		return f"{{ {offset_text} for {length_text} }}"

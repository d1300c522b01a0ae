#!/usr/bin/env python3

import enum
from chapterscanlib.detect.events import Medium

#============================================

class CompletionState(enum.Enum):
	ONGOING = 'ongoing'
	AUDIO_DONE = 'audio_done'
	VIDEO_DONE = 'video_done'
	ALL_DONE = 'all_done'

# (state, medium marked done) -> next state
TRANSITIONS = {
	(CompletionState.ONGOING, Medium.AUDIO): CompletionState.AUDIO_DONE,
	(CompletionState.ONGOING, Medium.VIDEO): CompletionState.VIDEO_DONE,
	(CompletionState.AUDIO_DONE, Medium.AUDIO): CompletionState.AUDIO_DONE,
	(CompletionState.AUDIO_DONE, Medium.VIDEO): CompletionState.ALL_DONE,
	(CompletionState.VIDEO_DONE, Medium.AUDIO): CompletionState.ALL_DONE,
	(CompletionState.VIDEO_DONE, Medium.VIDEO): CompletionState.VIDEO_DONE,
	(CompletionState.ALL_DONE, Medium.AUDIO): CompletionState.ALL_DONE,
	(CompletionState.ALL_DONE, Medium.VIDEO): CompletionState.ALL_DONE,
}

#============================================

class StreamCompletion():
	"""
	Tracks which media have read past the scan horizon.
	"""
	def __init__(self):
		self.state = CompletionState.ONGOING

	#============================
	def mark_done(self, medium: Medium) -> CompletionState:
		self.state = TRANSITIONS[(self.state, medium)]
		return self.state

	#============================
	def mark_audio_done(self) -> CompletionState:
		return self.mark_done(Medium.AUDIO)

	#============================
	def mark_video_done(self) -> CompletionState:
		return self.mark_done(Medium.VIDEO)

	#============================
	def is_done(self, medium: Medium) -> bool:
		if self.state is CompletionState.ALL_DONE:
			return True
		if medium is Medium.AUDIO:
			return self.state is CompletionState.AUDIO_DONE
		return self.state is CompletionState.VIDEO_DONE

	#============================
	def is_all_done(self) -> bool:
		return self.state is CompletionState.ALL_DONE

#!/usr/bin/env python3

# PIP3 modules
from tqdm import tqdm

# local repo modules
from chapterscanlib.core import utils

#============================================

class ProgressSink():
	"""
	Progress receiver that ignores everything.
	"""
	def update(self, position_ms: int) -> None:
		return

	#============================
	def message(self, text: str) -> None:
		return

	#============================
	def println(self, text: str) -> None:
		if not utils.is_quiet_mode():
			print(text)
		return

	#============================
	def close(self) -> None:
		return

#============================================

class TqdmProgress(ProgressSink):
	"""
	One tqdm bar per scanned file, counting milliseconds up to the horizon.
	"""
	def __init__(self, label: str, total_ms: int, position: int = 0):
		self.total_ms = total_ms
		self.bar = tqdm(total=total_ms, desc=label[:50], unit="ms",
			position=position, leave=False, dynamic_ncols=True,
			disable=utils.is_quiet_mode())

	#============================
	def update(self, position_ms: int) -> None:
		position_ms = min(max(position_ms, 0), self.total_ms)
		if position_ms > self.bar.n:
			self.bar.update(position_ms - self.bar.n)
		return

	#============================
	def message(self, text: str) -> None:
		self.bar.set_postfix_str(text)
		return

	#============================
	def println(self, text: str) -> None:
		if not utils.is_quiet_mode():
			tqdm.write(text)
		return

	#============================
	def close(self) -> None:
		self.bar.close()
		return

#!/usr/bin/env python3

"""
Simple (OGM style) chapter lists written with mkvpropedit.
"""

# Standard Library
import os
import shlex
import subprocess
import tempfile
from fractions import Fraction

# local repo modules
from chapterscanlib.core import utils
from chapterscanlib.core.errors import ChapterWriteError

#============================================

class Chapter():
	def __init__(self, number: int, start: Fraction, name: str):
		self.number = number
		self.start = Fraction(start)
		self.name = name

	#============================
	@classmethod
	def from_candidate(cls, index: int, candidate,
		name_template: str = "Silence {number}") -> 'Chapter':
		number = index + 1
		name = name_template.replace("{number}", str(number))
		return cls(number, candidate.offset, name)

	#============================
	def __eq__(self, other) -> bool:
		if not isinstance(other, Chapter):
			return NotImplemented
		return (self.number, self.start, self.name) == (other.number, other.start, other.name)

	#============================
	def __repr__(self) -> str:
		return f"Chapter({self.number}, {utils.format_timecode(self.start)}, {self.name!r})"

	#============================
	def to_text(self) -> str:
		lines = []
		lines.append(f"CHAPTER{self.number:02d}={utils.format_timecode(self.start)}")
		lines.append(f"CHAPTER{self.number:02d}NAME={self.name}")
		return "\n".join(lines)

#============================================

def chapters_from_candidates(candidates: list,
	name_template: str = "Silence {number}") -> list:
	chapters = []
	for index, candidate in enumerate(candidates):
		chapters.append(Chapter.from_candidate(index, candidate, name_template))
	return chapters

#============================================

def build_chapter_text(chapters: list) -> str:
	lines = [chapter.to_text() for chapter in chapters]
	if len(lines) == 0:
		return ""
	return "\n".join(lines) + "\n"

#============================================

def write_chapter_file(chapters: list) -> str:
	"""
	Write chapters to a temporary file.

	Returns:
		str: Path of the temporary chapter file; the caller removes it.
	"""
	text = build_chapter_text(chapters)
	try:
		temp_handle, temp_path = tempfile.mkstemp(prefix="chapters-", suffix=".txt")
		with os.fdopen(temp_handle, 'w', encoding='utf-8') as handle:
			handle.write(text)
			handle.flush()
			os.fsync(handle.fileno())
	except OSError as error:
		raise ChapterWriteError(f"writing temporary chapter file failed: {error}") from error
	return temp_path

#============================================

def read_payload(path: str) -> str:
	try:
		with open(path, 'r', encoding='utf-8') as handle:
			return handle.read()
	except OSError:
		return "unreadable"

#============================================

def set_chapters(mkv_file: str, chapters: list, tool: str = 'mkvpropedit') -> None:
	"""
	Replace the chapter list of a Matroska file.

	Args:
		mkv_file: File to edit in place.
		chapters: Chapter objects in the order to write.
		tool: mkvpropedit executable name or path.
	"""
	utils.ensure_file_exists(mkv_file)
	chapter_path = write_chapter_file(chapters)
	try:
		cmd = [tool, mkv_file, '--chapters', chapter_path]
		showcmd = shlex.join(cmd)
		if not utils.is_quiet_mode():
			print(f"CMD: '{showcmd}'")
		try:
			proc = subprocess.run(cmd, capture_output=True, text=True)
		except OSError as error:
			raise ChapterWriteError(f"running {tool} failed: {error}") from error
		if proc.returncode != 0:
			raise ChapterWriteError(
				f"unsuccessful for {mkv_file} - mkv chapter contents:\n"
				f"{read_payload(chapter_path)}\n"
				f"{tool} stdout:\n{proc.stdout}\n"
				f"stderr:\n{proc.stderr}"
			)
	finally:
		if os.path.exists(chapter_path):
			os.remove(chapter_path)
	return

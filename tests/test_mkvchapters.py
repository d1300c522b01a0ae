#!/usr/bin/env python3

"""
Chapter text building and the mkvpropedit hand-off.
"""

# Standard Library
import os
import subprocess
import sys
from fractions import Fraction

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from chapterscanlib.core import utils
from chapterscanlib.core.errors import ChapterWriteError
from chapterscanlib.detect.events import Candidate
from chapterscanlib.media import mkvchapters

#============================================

@pytest.fixture(autouse=True)
def quiet_mode():
	utils.set_quiet_mode(True)
	yield
	utils.set_quiet_mode(False)

#============================================

@pytest.fixture
def mkv_file(tmp_path):
	path = tmp_path / "episode.mkv"
	path.write_bytes(b"")
	return str(path)

#============================================

def _candidates() -> list:
	return [
		Candidate(Fraction(6), Fraction(3)),
		Candidate(Fraction(754, 10), Fraction(1, 2)),
	]

#============================================

def test_chapters_from_candidates() -> None:
	chapters = mkvchapters.chapters_from_candidates(_candidates())
	assert chapters == [
		mkvchapters.Chapter(1, Fraction(6), "Silence 1"),
		mkvchapters.Chapter(2, Fraction(754, 10), "Silence 2"),
	]

#============================================

def test_chapter_text() -> None:
	chapters = mkvchapters.chapters_from_candidates(_candidates(), "Break {number}")
	text = mkvchapters.build_chapter_text(chapters)
	assert text == (
		"CHAPTER01=00:00:06.000\n"
		"CHAPTER01NAME=Break 1\n"
		"CHAPTER02=00:01:15.400\n"
		"CHAPTER02NAME=Break 2\n"
	)
	assert mkvchapters.build_chapter_text([]) == ""

#============================================

def test_set_chapters_runs_tool(monkeypatch, mkv_file) -> None:
	calls = []

	def fake_run(cmd, capture_output=False, text=False):
		with open(cmd[3]) as handle:
			calls.append((cmd, handle.read()))
		return subprocess.CompletedProcess(cmd, 0, stdout="Done.\n", stderr="")

	monkeypatch.setattr(mkvchapters.subprocess, "run", fake_run)
	chapters = mkvchapters.chapters_from_candidates(_candidates())
	mkvchapters.set_chapters(mkv_file, chapters)
	assert len(calls) == 1
	cmd, payload = calls[0]
	assert cmd[:3] == ["mkvpropedit", mkv_file, "--chapters"]
	assert payload.startswith("CHAPTER01=00:00:06.000\n")
	assert not os.path.exists(cmd[3])

#============================================

def test_set_chapters_failure_reports_output(monkeypatch, mkv_file) -> None:
	seen_paths = []

	def fake_run(cmd, capture_output=False, text=False):
		seen_paths.append(cmd[3])
		return subprocess.CompletedProcess(cmd, 2, stdout="Error: bad chapters",
			stderr="mkvpropedit: stderr text")

	monkeypatch.setattr(mkvchapters.subprocess, "run", fake_run)
	chapters = mkvchapters.chapters_from_candidates(_candidates())
	with pytest.raises(ChapterWriteError) as info:
		mkvchapters.set_chapters(mkv_file, chapters)
	message = str(info.value)
	assert "CHAPTER02NAME=Silence 2" in message
	assert "Error: bad chapters" in message
	assert "mkvpropedit: stderr text" in message
	assert not os.path.exists(seen_paths[0])

#============================================

def test_set_chapters_missing_tool(mkv_file) -> None:
	with pytest.raises(ChapterWriteError):
		mkvchapters.set_chapters(mkv_file, [], tool="chapterscan-no-such-tool")

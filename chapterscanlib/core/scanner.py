#!/usr/bin/env python3

"""
Per-file scans and the parallel batch over many files.
"""

# Standard Library
import concurrent.futures
import os

# local repo modules
from chapterscanlib.core import utils
from chapterscanlib.core.progress import ProgressSink
from chapterscanlib.core.progress import TqdmProgress
from chapterscanlib.detect.driver import DetectionDriver
from chapterscanlib.media import mkvchapters
from chapterscanlib.media import pyav_engine

#============================================

def filter_candidates(candidates: list, min_offset) -> list:
	"""
	Drop candidates that start at or before min_offset.
	"""
	return [candidate for candidate in candidates if candidate.offset > min_offset]

#============================================

def scan_file(path: str, settings: dict, progress: ProgressSink = None) -> list:
	"""
	Detect quiet-and-dark candidates near the start of one file.

	Args:
		path: Media file path.
		settings: Flattened settings from chapterscanlib.core.config.
		progress: Optional progress sink.

	Returns:
		list: Candidates after the min_offset filter.
	"""
	container = pyav_engine.open_input(path)
	try:
		detectors = pyav_engine.build_detectors(container, settings)
		driver = DetectionDriver(detectors[0], detectors[1], settings['threshold'],
			progress=progress)
		candidates = driver.detect(pyav_engine.demux_packets(container, detectors),
			settings['until'])
	finally:
		container.close()
	return filter_candidates(candidates, settings['min_offset'])

#============================================

class FileScan():
	def __init__(self, path: str, settings: dict, commit: bool = False,
		progress: ProgressSink = None):
		self.path = path
		self.settings = settings
		self.commit = commit
		self.progress = progress if progress is not None else ProgressSink()
		self.candidates = []
		self.chapters = []

	#============================
	def run(self) -> list:
		self.candidates = scan_file(self.path, self.settings, self.progress)
		self.chapters = mkvchapters.chapters_from_candidates(self.candidates,
			self.settings['name_template'])
		if self.commit:
			mkvchapters.set_chapters(self.path, self.chapters,
				tool=self.settings['chapter_tool'])
			self.progress.println(f"set {len(self.chapters)} chapters on {self.path}")
		else:
			self.progress.println(f"would set chapters on {self.path}:")
			for chapter in self.chapters:
				self.progress.println(chapter.to_text())
		return self.chapters

#============================================

def default_jobs(path_count: int) -> int:
	cpu_count = os.cpu_count() or 1
	return max(1, min(path_count, cpu_count))

#============================================

def _run_one(path: str, settings: dict, commit: bool, position: int,
	show_progress: bool) -> dict:
	result = {'path': path, 'candidates': [], 'chapters': [], 'error': None}
	progress = ProgressSink()
	if show_progress:
		total_ms = utils.seconds_to_millis(settings['until'])
		progress = TqdmProgress(os.path.basename(path), total_ms, position=position)
	scan = FileScan(path, settings, commit=commit, progress=progress)
	try:
		scan.run()
	except Exception as error:
		# any failure belongs to this file only
		result['error'] = error
	finally:
		progress.close()
	result['candidates'] = scan.candidates
	result['chapters'] = scan.chapters
	return result

#============================================

def run_batch(paths: list, settings: dict, commit: bool = False,
	show_progress: bool = True) -> list:
	"""
	Scan files in parallel; one failing file does not stop the others.

	Returns:
		list: One result dict per path, in input order, with keys
		path, candidates, chapters and error (None on success).
	"""
	if len(paths) == 0:
		return []
	if commit:
		utils.check_dependency(settings['chapter_tool'])
	jobs = settings.get('jobs', 0)
	if jobs == 0:
		jobs = default_jobs(len(paths))
	results = []
	with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
		futures = []
		for position, path in enumerate(paths):
			futures.append(executor.submit(_run_one, path, settings, commit,
				position, show_progress))
		for future in futures:
			results.append(future.result())
	return results

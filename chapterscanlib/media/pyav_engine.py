#!/usr/bin/env python3

"""
PyAV decode + libavfilter detection engines.

Each engine decodes one stream and runs its frames through a filter graph
ending in a sink, with silencedetect (audio) or blackdetect (video) in the
middle. The detect filters tag frames with lavfi.* metadata, which the pause
detectors classify.
"""

# Standard Library
from fractions import Fraction

# PIP3 modules
import av
import av.logging

# local repo modules
from chapterscanlib.core import utils
from chapterscanlib.core.errors import SetupError
from chapterscanlib.detect.pause_detector import BlankDetector
from chapterscanlib.detect.pause_detector import SilenceDetector

#============================================

class FilterEngine():
	def __init__(self, stream, filter_name: str, filter_args: str):
		self.stream = stream
		self.kind = stream.type
		self.codec_context = stream.codec_context
		self.time_base = stream.time_base
		self.filter_desc = f"{filter_name}={filter_args}"
		self.graph = self._build_graph(filter_name, filter_args)

	#============================
	def _build_graph(self, filter_name: str, filter_args: str):
		graph = av.filter.Graph()
		try:
			if self.kind == 'audio':
				source = graph.add_abuffer(template=self.stream)
				sink = graph.add('abuffersink')
			elif self.kind == 'video':
				source = graph.add_buffer(template=self.stream)
				sink = graph.add('buffersink')
			else:
				raise SetupError(f"no detection filter for {self.kind} streams")
			detect = graph.add(filter_name, filter_args)
			source.link_to(detect)
			detect.link_to(sink)
			graph.configure()
		except (av.error.FFmpegError, ValueError) as error:
			raise SetupError(
				f"building {self.kind} filter graph '{self.filter_desc}' failed: {error}"
			) from error
		return graph

	#============================
	def decode(self, packet) -> list:
		return self.codec_context.decode(packet)

	#============================
	def filter(self, frame):
		self.graph.push(frame)
		while True:
			try:
				yield self.graph.pull()
			except (BlockingIOError, EOFError):
				# PyAV's EAGAIN and EOF errors subclass these builtins
				return

	#============================
	def frame_time(self, frame) -> Fraction:
		if frame.pts is None:
			return None
		time_base = frame.time_base if frame.time_base is not None else self.time_base
		return utils.to_duration(frame.pts, time_base)

	#============================
	def frame_tags(self, frame) -> dict:
		return dict(frame.metadata)

#============================================

def format_number(value) -> str:
	text = f"{float(value):.6f}".rstrip('0').rstrip('.')
	if text in ("", "-0"):
		text = "0"
	return text

#============================================

def silence_filter_args(settings: dict) -> str:
	"""
	Build silencedetect arguments, e.g. "n=-50dB:d=0.3".
	"""
	noise = format_number(settings['noise_db'])
	duration = format_number(settings['min_silence'])
	return f"n={noise}dB:d={duration}"

#============================================

def black_filter_args(settings: dict) -> str:
	"""
	Build blackdetect arguments, e.g. "d=0.5:pic_th=0.98:pix_th=0.1".
	"""
	duration = format_number(settings['min_black'])
	picture = format_number(settings['picture_threshold'])
	pixel = format_number(settings['pixel_threshold'])
	return f"d={duration}:pic_th={picture}:pix_th={pixel}"

#============================================

def best_stream(container, kind: str):
	stream = container.streams.best(kind)
	if stream is None:
		raise SetupError(f"no {kind} stream found in {container.name}")
	return stream

#============================================

def build_detectors(container, settings: dict) -> tuple:
	"""
	Pick the best audio and video streams and wrap each in a detector.

	Args:
		container: Open PyAV input container.
		settings: Flattened settings from chapterscanlib.core.config.

	Returns:
		tuple: (SilenceDetector, BlankDetector)
	"""
	audio_stream = best_stream(container, 'audio')
	video_stream = best_stream(container, 'video')
	video_stream.thread_type = 'AUTO'
	audio_engine = FilterEngine(audio_stream, 'silencedetect',
		silence_filter_args(settings))
	video_engine = FilterEngine(video_stream, 'blackdetect',
		black_filter_args(settings))
	audio = SilenceDetector(audio_stream.index, audio_engine)
	video = BlankDetector(video_stream.index, video_engine)
	return (audio, video)

#============================================

def demux_packets(container, detectors):
	"""
	Yield (stream_index, packet) pairs in container order for the detectors' streams.
	"""
	streams = [detector.engine.stream for detector in detectors]
	for packet in container.demux(*streams):
		yield (packet.stream.index, packet)

#============================================

def open_input(path: str):
	utils.ensure_file_exists(path)
	return av.open(path)

#============================================

def set_log_level_warning() -> None:
	av.logging.set_level(av.logging.WARNING)
	return

#!/usr/bin/env python3

"""
YAML configuration for chapter scans.

A config file looks like:

	chapterscan: 1
	settings:
	  scan: {until: 10m, threshold: 200ms, min_offset: 1s, jobs: 0}
	  audio: {noise_db: -50.0, min_silence: 0.3}
	  video: {pixel_threshold: 0.1, picture_threshold: 0.98, min_black: 0.5}
	  chapters: {name_template: "Silence {number}", tool: mkvpropedit}

build_settings() validates it and flattens it into one settings dict.
"""

# Standard Library
import os

# PIP3 modules
import yaml

# local repo modules
from chapterscanlib.core import utils

#============================================

CONFIG_VERSION = 1

#============================================

def default_config() -> dict:
	return {
		'chapterscan': CONFIG_VERSION,
		'settings': {
			'scan': {
				'until': '10m',
				'threshold': '200ms',
				'min_offset': '1s',
				'jobs': 0,
			},
			'audio': {
				'noise_db': -50.0,
				'min_silence': 0.3,
			},
			'video': {
				'pixel_threshold': 0.1,
				'picture_threshold': 0.98,
				'min_black': 0.5,
			},
			'chapters': {
				'name_template': "Silence {number}",
				'tool': 'mkvpropedit',
			},
		},
	}

#============================================

def write_config_file(config_path: str, config: dict) -> None:
	text = yaml.safe_dump(config, sort_keys=False)
	os.makedirs(os.path.dirname(config_path) or '.', exist_ok=True)
	with open(config_path, 'w', encoding='utf-8') as handle:
		handle.write(text)
	return

#============================================

def load_config(config_path: str) -> dict:
	"""
	Load a config file from disk.

	Args:
		config_path: Config file path.

	Returns:
		dict: Parsed config dictionary.
	"""
	file_size = os.path.getsize(config_path)
	if file_size > 10 ** 6:
		raise RuntimeError("config file is larger than 1MB")
	with open(config_path, 'r', encoding='utf-8') as handle:
		data = yaml.safe_load(handle)
	if not isinstance(data, dict):
		raise RuntimeError("config file must be a mapping")
	if data.get('chapterscan') != CONFIG_VERSION:
		raise RuntimeError(f"config file must set chapterscan: {CONFIG_VERSION}")
	return data

#============================================

def coerce_float(value, config_path: str, key_path: str) -> float:
	if isinstance(value, bool):
		raise RuntimeError(f"config {config_path}: {key_path} must be a number")
	try:
		return float(value)
	except (TypeError, ValueError) as error:
		raise RuntimeError(f"config {config_path}: {key_path} must be a number") from error

#============================================

def coerce_int(value, config_path: str, key_path: str) -> int:
	if isinstance(value, bool) or not isinstance(value, int):
		raise RuntimeError(f"config {config_path}: {key_path} must be an integer")
	return value

#============================================

def coerce_duration(value, config_path: str, key_path: str):
	try:
		return utils.parse_duration(value)
	except RuntimeError as error:
		raise RuntimeError(f"config {config_path}: {key_path}: {error}") from error

#============================================

def coerce_section(settings: dict, name: str, config_path: str) -> dict:
	section = settings.get(name, {})
	if section is None:
		return {}
	if not isinstance(section, dict):
		raise RuntimeError(f"config {config_path}: settings.{name} must be a mapping")
	return section

#============================================

def build_settings(config: dict, config_path: str = "<defaults>") -> dict:
	"""
	Normalize settings with defaults and validate ranges.

	Args:
		config: Raw config dictionary.
		config_path: Config file path, used in error messages.

	Returns:
		dict: Flattened settings.
	"""
	defaults = default_config()['settings']
	settings = config.get('settings', {})
	if settings is None:
		settings = {}
	if not isinstance(settings, dict):
		raise RuntimeError(f"config {config_path}: settings must be a mapping")
	merged = {}
	for name, default_section in defaults.items():
		section = dict(default_section)
		section.update(coerce_section(settings, name, config_path))
		merged[name] = section
	scan = merged['scan']
	audio = merged['audio']
	video = merged['video']
	chapters = merged['chapters']
	result = {
		'until': coerce_duration(scan['until'], config_path, 'scan.until'),
		'threshold': coerce_duration(scan['threshold'], config_path, 'scan.threshold'),
		'min_offset': coerce_duration(scan['min_offset'], config_path, 'scan.min_offset'),
		'jobs': coerce_int(scan['jobs'], config_path, 'scan.jobs'),
		'noise_db': coerce_float(audio['noise_db'], config_path, 'audio.noise_db'),
		'min_silence': coerce_duration(audio['min_silence'], config_path,
			'audio.min_silence'),
		'pixel_threshold': coerce_float(video['pixel_threshold'], config_path,
			'video.pixel_threshold'),
		'picture_threshold': coerce_float(video['picture_threshold'], config_path,
			'video.picture_threshold'),
		'min_black': coerce_duration(video['min_black'], config_path, 'video.min_black'),
		'name_template': str(chapters['name_template']),
		'chapter_tool': str(chapters['tool']),
	}
	validate_settings(result)
	return result

#============================================

def validate_settings(settings: dict) -> None:
	if settings['until'] <= 0:
		raise RuntimeError("until must be positive")
	if settings['threshold'] < 0:
		raise RuntimeError("threshold must not be negative")
	if settings['min_offset'] < 0:
		raise RuntimeError("min_offset must not be negative")
	if settings['jobs'] < 0:
		raise RuntimeError("jobs must be 0 (auto) or positive")
	if settings['noise_db'] > 0:
		raise RuntimeError("noise_db must be 0 or negative dBFS")
	if settings['min_silence'] <= 0:
		raise RuntimeError("min_silence must be positive")
	if settings['min_black'] <= 0:
		raise RuntimeError("min_black must be positive")
	for key in ('pixel_threshold', 'picture_threshold'):
		if settings[key] < 0 or settings[key] > 1:
			raise RuntimeError(f"{key} must be between 0 and 1")
	if '{number}' not in settings['name_template']:
		raise RuntimeError("chapters.name_template must contain {number}")
	if settings['chapter_tool'].strip() == "":
		raise RuntimeError("chapters.tool must not be empty")
	return

#============================================

def resolve_settings(config_path: str = None) -> dict:
	"""
	Load settings from a config path, writing the defaults there first if the
	file does not exist. Without a path the built-in defaults are used.
	"""
	if config_path is None:
		return build_settings(default_config())
	if not os.path.exists(config_path):
		write_config_file(config_path, default_config())
		if not utils.is_quiet_mode():
			print(f"Wrote default config: {config_path}")
	config = load_config(config_path)
	return build_settings(config, config_path)

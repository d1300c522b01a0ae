#!/usr/bin/env python3

import math
import os
import re
import shutil
from fractions import Fraction

#============================================

QUIET_MODE = False

DURATION_UNITS = {
	'h': Fraction(3600),
	'hr': Fraction(3600),
	'hour': Fraction(3600),
	'hours': Fraction(3600),
	'm': Fraction(60),
	'min': Fraction(60),
	'mins': Fraction(60),
	'minute': Fraction(60),
	'minutes': Fraction(60),
	's': Fraction(1),
	'sec': Fraction(1),
	'secs': Fraction(1),
	'second': Fraction(1),
	'seconds': Fraction(1),
	'ms': Fraction(1, 1000),
	'msec': Fraction(1, 1000),
	'us': Fraction(1, 1000000),
}

DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")

#============================================

def set_quiet_mode(quiet: bool) -> None:
	global QUIET_MODE
	QUIET_MODE = bool(quiet)
	return

#============================================

def is_quiet_mode() -> bool:
	if QUIET_MODE:
		return True
	return os.environ.get('CHAPTERSCAN_QUIET', '') not in ('', '0')

#============================================

def to_duration(timestamp: int, time_base) -> Fraction:
	"""
	Convert a stream timestamp into seconds.

	Args:
		timestamp: Timestamp in time_base units.
		time_base: Seconds per unit, as a Fraction or (num, den) pair.

	Returns:
		Fraction: Exact time in seconds.
	"""
	if isinstance(time_base, tuple):
		time_base = Fraction(time_base[0], time_base[1])
	if time_base is None:
		raise RuntimeError("time base is required to convert a timestamp")
	return Fraction(timestamp) * Fraction(time_base)

#============================================

def parse_timecode(value: str) -> Fraction:
	parts = value.split(':')
	if len(parts) > 3:
		raise RuntimeError(f"invalid timecode: {value}")
	seconds = Fraction(parts.pop())
	minutes = Fraction(parts.pop())
	hours = Fraction(0)
	if len(parts) > 0:
		hours = Fraction(parts.pop())
	return hours * 3600 + minutes * 60 + seconds

#============================================

def parse_duration(raw_time) -> Fraction:
	"""
	Parse a duration into exact seconds.

	Accepts plain seconds (int, float or numeric string), timecodes such as
	"01:30" or "00:01:30.5", and unit strings such as "10m", "200ms" or
	"1h 30m".

	Args:
		raw_time: Raw duration value.

	Returns:
		Fraction: Duration in seconds.
	"""
	if raw_time is None:
		raise RuntimeError("duration value is required")
	if isinstance(raw_time, bool):
		raise RuntimeError("duration must be a number or a duration string")
	if isinstance(raw_time, (int, Fraction)):
		return Fraction(raw_time)
	if isinstance(raw_time, float):
		if not math.isfinite(raw_time):
			raise RuntimeError(f"duration must be finite: {raw_time}")
		return Fraction(str(raw_time))
	if not isinstance(raw_time, str):
		raise RuntimeError("duration must be a number or a duration string")
	value = raw_time.strip().lower()
	if value == "":
		raise RuntimeError("duration value is empty")
	try:
		if ':' in value:
			return parse_timecode(value)
		return Fraction(value)
	except (ValueError, ZeroDivisionError):
		pass
	total = Fraction(0)
	position = 0
	for match in DURATION_PART_RE.finditer(value):
		if value[position:match.start()].strip() != "":
			raise RuntimeError(f"invalid duration: {raw_time}")
		unit = DURATION_UNITS.get(match.group(2))
		if unit is None:
			raise RuntimeError(f"unknown duration unit '{match.group(2)}' in {raw_time}")
		total += Fraction(match.group(1)) * unit
		position = match.end()
	if position == 0 or value[position:].strip() != "":
		raise RuntimeError(f"invalid duration: {raw_time}")
	return total

#============================================

def seconds_to_millis(seconds) -> int:
	return int(round(Fraction(seconds) * 1000))

#============================================

def format_duration(seconds) -> str:
	"""
	Format a duration in short human form, e.g. "1m 6s 250ms".
	"""
	millis = seconds_to_millis(seconds)
	if millis == 0:
		return "0s"
	sign = ""
	if millis < 0:
		sign = "-"
		millis = -millis
	hours, millis = divmod(millis, 3600000)
	minutes, millis = divmod(millis, 60000)
	secs, millis = divmod(millis, 1000)
	parts = []
	if hours:
		parts.append(f"{hours}h")
	if minutes:
		parts.append(f"{minutes}m")
	if secs:
		parts.append(f"{secs}s")
	if millis:
		parts.append(f"{millis}ms")
	return sign + " ".join(parts)

#============================================

def format_timecode(seconds) -> str:
	"""
	Format seconds as HH:MM:SS.mmm.
	"""
	millis = seconds_to_millis(seconds)
	if millis < 0:
		raise RuntimeError("timecode must not be negative")
	hours, millis = divmod(millis, 3600000)
	minutes, millis = divmod(millis, 60000)
	secs, millis = divmod(millis, 1000)
	return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise RuntimeError(f"file not found: {filepath}")
	return

#============================================

def check_dependency(cmd_name: str) -> None:
	if shutil.which(cmd_name) is None:
		raise RuntimeError(f"missing dependency: {cmd_name}")
	return

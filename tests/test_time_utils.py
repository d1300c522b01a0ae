#!/usr/bin/env python3

"""
Unit tests for duration parsing and formatting helpers.
"""

# Standard Library
import os
import sys
from fractions import Fraction

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from chapterscanlib.core import utils

#============================================

def test_to_duration_is_exact() -> None:
	assert utils.to_duration(48000, Fraction(1, 48000)) == 1
	assert utils.to_duration(1001, Fraction(1, 30000)) == Fraction(1001, 30000)
	assert utils.to_duration(90, (1, 1000)) == Fraction(9, 100)

#============================================

@pytest.mark.parametrize("raw, expected", [
	("10m", Fraction(600)),
	("200ms", Fraction(1, 5)),
	("1h 30m", Fraction(5400)),
	("1m30s", Fraction(90)),
	("1.5s", Fraction(3, 2)),
	("2 min", Fraction(120)),
	("45", Fraction(45)),
	("01:30", Fraction(90)),
	("00:01:02.5", Fraction(125, 2)),
	(0.3, Fraction(3, 10)),
	(12, Fraction(12)),
])
def test_parse_duration(raw, expected) -> None:
	assert utils.parse_duration(raw) == expected

#============================================

@pytest.mark.parametrize("raw", ["", "ten minutes", "10 parsecs", "5m junk", None, True,
	float("inf"), float("nan")])
def test_parse_duration_rejects(raw) -> None:
	with pytest.raises(RuntimeError):
		utils.parse_duration(raw)

#============================================

def test_format_duration() -> None:
	assert utils.format_duration(Fraction(0)) == "0s"
	assert utils.format_duration(Fraction(6)) == "6s"
	assert utils.format_duration(Fraction(66250, 1000)) == "1m 6s 250ms"
	assert utils.format_duration(Fraction(3600)) == "1h"

#============================================

def test_format_timecode() -> None:
	assert utils.format_timecode(Fraction(6)) == "00:00:06.000"
	assert utils.format_timecode(Fraction(3725, 1) + Fraction(7, 100)) == "01:02:05.070"
	with pytest.raises(RuntimeError):
		utils.format_timecode(-1)

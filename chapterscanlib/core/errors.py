#!/usr/bin/env python3

#============================================

class ContractViolation(RuntimeError):
	"""A detector or correlator received an impossible event sequence."""

#============================================

class SetupError(RuntimeError):
	"""Streams, decoders or filter graphs could not be prepared."""

#============================================

class ChapterWriteError(RuntimeError):
	"""Chapter text could not be written or the chapter tool failed."""

#!/usr/bin/env python3

import argparse
import sys
from chapterscanlib.core import config
from chapterscanlib.core import scanner
from chapterscanlib.core import utils
from chapterscanlib.media import pyav_engine

#============================================

def duration_arg(value: str):
	"""
	Argparse type for durations such as 10m or 200ms.
	"""
	try:
		return utils.parse_duration(value)
	except RuntimeError as error:
		raise argparse.ArgumentTypeError(str(error)) from error

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Detect quiet black stretches near the start of video files "
		"and mark them as chapters.")
	parser.add_argument('paths', nargs='+', metavar='FILE',
		help='the mkv files to treat')
	parser.add_argument('-u', '--until', dest='until', type=duration_arg,
		help='scan this long into the beginning of the file (default 10m)')
	parser.add_argument('-t', '--threshold', dest='threshold', type=duration_arg,
		help='only consider pauses longer than this as real breaks (default 200ms)')
	parser.add_argument('-m', '--min-offset', dest='min_offset', type=duration_arg,
		help='ignore breaks starting this close to the beginning (default 1s)')
	parser.add_argument('-c', '--config', dest='config_file',
		help='scan config yaml; written with defaults if missing')
	parser.add_argument('-j', '--jobs', dest='jobs', type=int,
		help='files to scan in parallel (0 = one per CPU)')
	parser.add_argument('-f', '--do-it', dest='do_it', action='store_true',
		help='actually write chapter markers, replacing any existing chapters')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='no progress bars or chapter listings')
	parser.set_defaults(do_it=False, quiet=False)
	args = parser.parse_args(argv)
	return args

#============================================

def apply_overrides(settings: dict, args: argparse.Namespace) -> dict:
	for key in ('until', 'threshold', 'min_offset', 'jobs'):
		value = getattr(args, key)
		if value is not None:
			settings[key] = value
	config.validate_settings(settings)
	return settings

#============================================

def main(argv: list = None) -> int:
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	pyav_engine.set_log_level_warning()
	settings = apply_overrides(config.resolve_settings(args.config_file), args)
	try:
		results = scanner.run_batch(args.paths, settings, commit=args.do_it,
			show_progress=not args.quiet)
	except RuntimeError as error:
		print(f"error: {error}", file=sys.stderr)
		return 1
	failures = 0
	for result in results:
		if result['error'] is None:
			continue
		failures += 1
		print(f"{result['path']}: {result['error']}", file=sys.stderr)
	if failures > 0:
		print(f"{failures} of {len(results)} files failed", file=sys.stderr)
		return 1
	return 0


if __name__ == '__main__':
	sys.exit(main())

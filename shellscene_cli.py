#!/usr/bin/env python3

import argparse
import json
import os
import sys
import yaml
from shellscenelib.core import config
from shellscenelib.core import layout
from shellscenelib.core import scenescript
from shellscenelib.core import schedule
from shellscenelib.core import utils
from shellscenelib.core.model import Timeline
from shellscenelib.core.project import SceneBuild
from shellscenelib.media.castfile import CastDurationProbe

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Compile scene scripts and build narration audio")
	parser.add_argument('-t', '--timelines', dest='timelines_dir',
		help='directory of .timeline scene scripts')
	parser.add_argument('-p', '--public', dest='public_dir',
		help='public output directory for speech assets and compiled timelines')
	parser.add_argument('-f', '--format', dest='speech_format',
		choices=('opus', 'vorbis'), help='encoded speech format')
	parser.add_argument('-c', '--config', dest='config_file',
		help='yaml config file')
	parser.add_argument('--write-default-config', dest='write_default_config',
		metavar='PATH', help='write the default config to PATH and exit')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='parse and validate scripts only, do not synthesize')
	parser.add_argument('-s', '--schedule', dest='schedule_file',
		help='print the frame schedule of a script or compiled timeline')
	parser.add_argument('--fps', dest='fps',
		help='frames per second for the schedule, overrides the config')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='only print errors')
	parser.set_defaults(dry_run=False, quiet=False)
	args = parser.parse_args(argv)
	return args

#============================================

def load_settings(args) -> dict:
	raw_config = None
	config_path = "<code defaults>"
	if args.config_file is not None:
		raw_config = config.load_config(args.config_file)
		config_path = args.config_file
	settings = config.build_settings(raw_config, config_path)
	if args.speech_format is not None:
		settings['speech']['format'] = args.speech_format
	if args.timelines_dir is not None:
		settings['paths']['timelines_dir'] = args.timelines_dir
	if args.public_dir is not None:
		settings['paths']['public_dir'] = args.public_dir
	if args.fps is not None:
		settings['profile']['fps'] = utils.parse_fps(args.fps)
	return settings

#============================================

def load_timeline(timeline_file: str) -> Timeline:
	utils.ensure_file_exists(timeline_file)
	if timeline_file.lower().endswith(".json"):
		with open(timeline_file, 'r', encoding='utf-8') as handle:
			try:
				data = json.load(handle)
			except ValueError as error:
				raise RuntimeError(f"invalid timeline json {timeline_file}: {error}") from error
		return Timeline.from_dict(data)
	return scenescript.parse_file(timeline_file)

#============================================

def print_schedule(timeline_file: str, settings: dict) -> None:
	timeline = load_timeline(timeline_file)
	fps = settings['profile']['fps']
	probe = CastDurationProbe(settings['paths']['public_dir'])
	base_frames = layout.clip_base_frames(timeline, fps, probe)
	plan = schedule.build_schedule(timeline, base_frames, fps)
	print(yaml.safe_dump(plan, sort_keys=False, allow_unicode=True))

#============================================

def main(argv: list = None) -> int:
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	try:
		if args.write_default_config is not None:
			if os.path.exists(args.write_default_config):
				raise RuntimeError(f"config already exists: {args.write_default_config}")
			config.write_config_file(args.write_default_config, config.default_config())
			utils.print_status(f"Wrote default config: {args.write_default_config}")
			return 0
		settings = load_settings(args)
		if args.schedule_file is not None:
			print_schedule(args.schedule_file, settings)
			return 0
		build = SceneBuild(settings=settings, dry_run=args.dry_run)
		result = build.run()
	except RuntimeError as error:
		utils.print_error(f"[speech] build failed: {error}")
		return 2
	if result.status != 0:
		utils.print_error("[speech] one or more timelines failed to build")
	return result.status


if __name__ == '__main__':
	sys.exit(main())

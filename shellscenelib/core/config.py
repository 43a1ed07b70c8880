#!/usr/bin/env python3

import os
import yaml
from shellscenelib.core import utils

#============================================

CONFIG_HEADER_KEY = "shellscene"
CONFIG_HEADER_VALUE = 1

TRANSITION_NAMES = ('cut', 'fade', 'crossfade', 'swipe', 'slide', 'wipe', 'blur')
OVERLAPPING_TRANSITIONS = ('swipe', 'crossfade')
DIRECTIONS = ('left', 'right', 'up', 'down')
FADE_MODES = ('in', 'out', 'both')
ANCHORS = ('inBegin', 'inEnd', 'outBegin', 'outEnd', 'absolute')
# older scripts used these names before the in/out anchor set
ANCHOR_ALIASES = {
	'clipstart': 'inBegin',
	'baseend': 'outBegin',
	'visibleend': 'outEnd',
}

# single source for implicit values shared by parser, builder and scheduler
DEFAULTS = {
	'timeline_name': "timeline",
	'voice': "af_heart",
	'anchor': "inBegin",
	'offset_sec': 0.0,
	'card_seconds': 3.0,
	'card_audio_anchor': "inEnd",
	'cast_audio_anchor': "inBegin",
	'volume': 1.0,
	'loop': False,
	'fade_in_sec': 0.0,
	'fade_out_sec': 0.0,
	'fps': 30,
	'speech_format': "opus",
	'model_id': "hexgrad/Kokoro-82M",
	'sample_rate': 24000,
	'timelines_dir': "timelines",
	'public_dir': "public",
}

DEFAULT_PRONUNCIATION = [
	("d.rymcg.tech", "dee dot rye mic gee dot tech"),
	("Traefik", "traffic"),
	("443", "four four three"),
]

#============================================

def canonical_anchor(raw_anchor: str):
	"""
	Map an anchor keyword to its canonical spelling.

	Args:
		raw_anchor: Anchor text in any letter case, or a legacy alias.

	Returns:
		str: Canonical anchor name, or None when not recognized.
	"""
	if not isinstance(raw_anchor, str):
		return None
	lowered = raw_anchor.strip().lower()
	for anchor in ANCHORS:
		if anchor.lower() == lowered:
			return anchor
	return ANCHOR_ALIASES.get(lowered)

#============================================

def default_config() -> dict:
	return {
		CONFIG_HEADER_KEY: CONFIG_HEADER_VALUE,
		"settings": {
			"paths": {
				"timelines_dir": DEFAULTS['timelines_dir'],
				"public_dir": DEFAULTS['public_dir'],
			},
			"speech": {
				"format": DEFAULTS['speech_format'],
				"model_id": DEFAULTS['model_id'],
				"sample_rate": DEFAULTS['sample_rate'],
				"ffmpeg": None,
			},
			"profile": {
				"fps": DEFAULTS['fps'],
			},
			"pronunciation": [
				{"pattern": pattern, "replacement": replacement}
				for (pattern, replacement) in DEFAULT_PRONUNCIATION
			],
		},
	}

#============================================

def write_config_file(config_path: str, config: dict) -> None:
	text = yaml.safe_dump(config, sort_keys=False)
	utils.write_text_file(config_path, text)
	return

#============================================

def load_config(config_path: str) -> dict:
	"""
	Load a config file from disk.

	Args:
		config_path: Config file path.

	Returns:
		dict: Parsed config mapping.
	"""
	utils.ensure_file_exists(config_path)
	with open(config_path, "r", encoding="utf-8") as handle:
		try:
			data = yaml.safe_load(handle)
		except yaml.YAMLError as error:
			raise RuntimeError(f"config {config_path}: invalid yaml: {error}") from error
	if not isinstance(data, dict):
		raise RuntimeError("config file must be a mapping")
	if data.get(CONFIG_HEADER_KEY) != CONFIG_HEADER_VALUE:
		raise RuntimeError(f"config file must set {CONFIG_HEADER_KEY}: {CONFIG_HEADER_VALUE}")
	return data

#============================================

def coerce_int(value, config_path: str, key_path: str) -> int:
	if isinstance(value, bool):
		raise RuntimeError(f"config {config_path}: {key_path} must be an integer")
	if isinstance(value, int):
		return value
	if isinstance(value, float):
		return int(value)
	if isinstance(value, str):
		return int(float(value))
	raise RuntimeError(f"config {config_path}: {key_path} must be an integer")

#============================================

def coerce_str(value, config_path: str, key_path: str) -> str:
	if isinstance(value, str):
		return value
	raise RuntimeError(f"config {config_path}: {key_path} must be a string")

#============================================

def _section(overrides: dict, name: str, config_path: str) -> dict:
	section = overrides.get(name, {})
	if section is None:
		return {}
	if not isinstance(section, dict):
		raise RuntimeError(f"config {config_path}: settings.{name} must be a mapping")
	return section

#============================================

def _parse_pronunciation(entries, config_path: str) -> list:
	if not isinstance(entries, list):
		raise RuntimeError(f"config {config_path}: settings.pronunciation must be a list")
	table = []
	for index, entry in enumerate(entries):
		key_path = f"settings.pronunciation[{index}]"
		if not isinstance(entry, dict):
			raise RuntimeError(f"config {config_path}: {key_path} must be a mapping")
		pattern = coerce_str(entry.get('pattern'), config_path, f"{key_path}.pattern")
		replacement = coerce_str(entry.get('replacement'), config_path,
			f"{key_path}.replacement")
		if pattern.strip() == "":
			raise RuntimeError(f"config {config_path}: {key_path}.pattern must not be empty")
		table.append((pattern, replacement))
	return table

#============================================

def build_settings(config: dict = None, config_path: str = "<code defaults>",
	environ: dict = None) -> dict:
	"""
	Normalize settings over the defaults, then apply environment overrides.

	Args:
		config: Raw config mapping, or None for code defaults.
		config_path: Config file path used in error messages.
		environ: Environment mapping; os.environ when None.

	Returns:
		dict: Normalized settings.
	"""
	if environ is None:
		environ = os.environ
	defaults = default_config()['settings']
	overrides = {}
	if isinstance(config, dict):
		overrides = config.get('settings', {}) or {}
	if not isinstance(overrides, dict):
		raise RuntimeError(f"config {config_path}: settings must be a mapping")
	paths = dict(defaults['paths'])
	paths.update(_section(overrides, 'paths', config_path))
	speech = dict(defaults['speech'])
	speech.update(_section(overrides, 'speech', config_path))
	profile = dict(defaults['profile'])
	profile.update(_section(overrides, 'profile', config_path))
	pronunciation = overrides.get('pronunciation', defaults['pronunciation'])
	speech_format = environ.get('SPEECH_FORMAT') or speech.get('format')
	speech_format = coerce_str(speech_format, config_path, "settings.speech.format")
	if speech_format not in ('opus', 'vorbis'):
		raise RuntimeError(f"config {config_path}: settings.speech.format must be opus or vorbis")
	ffmpeg_bin = environ.get('FFMPEG_PATH') or speech.get('ffmpeg')
	if ffmpeg_bin is not None:
		ffmpeg_bin = coerce_str(ffmpeg_bin, config_path, "settings.speech.ffmpeg")
	return {
		'paths': {
			'timelines_dir': coerce_str(paths.get('timelines_dir'), config_path,
				"settings.paths.timelines_dir"),
			'public_dir': coerce_str(paths.get('public_dir'), config_path,
				"settings.paths.public_dir"),
		},
		'speech': {
			'format': speech_format,
			'model_id': coerce_str(speech.get('model_id'), config_path,
				"settings.speech.model_id"),
			'sample_rate': coerce_int(speech.get('sample_rate'), config_path,
				"settings.speech.sample_rate"),
			'ffmpeg': ffmpeg_bin,
		},
		'profile': {
			'fps': utils.parse_fps(profile.get('fps')),
		},
		'pronunciation': _parse_pronunciation(pronunciation, config_path),
	}

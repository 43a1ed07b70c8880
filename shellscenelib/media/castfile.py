#!/usr/bin/env python3

"""
Duration probe for asciinema terminal recordings (.cast files).
"""

import json
import os
from shellscenelib.core import utils

#============================================

def _event_time(event):
	if isinstance(event, list) and len(event) > 0:
		value = event[0]
		if isinstance(value, (int, float)) and not isinstance(value, bool):
			return float(value)
	return None

#============================================

def _whole_document_duration(text: str):
	try:
		data = json.loads(text)
	except ValueError:
		return None
	if not isinstance(data, dict):
		return None
	duration = data.get('duration')
	if isinstance(duration, (int, float)) and not isinstance(duration, bool):
		return float(duration)
	# asciicast v1 keeps every event in one stdout list
	events = data.get('stdout')
	if isinstance(events, list) and len(events) > 0:
		return _event_time(events[-1])
	return None

#============================================

def _last_event_duration(text: str):
	lines = [line for line in text.splitlines() if line.strip() != ""]
	if len(lines) < 2:
		return None
	try:
		event = json.loads(lines[-1])
	except ValueError:
		return None
	return _event_time(event)

#============================================

def cast_duration_from_text(text: str) -> float:
	"""
	Duration in seconds of an asciicast document, or 0.0 when unknown.

	Args:
		text: Raw .cast file contents (v1 JSON or v2 newline-delimited JSON).

	Returns:
		float: Duration in seconds.
	"""
	duration = _whole_document_duration(text)
	if duration is not None:
		return duration
	duration = _last_event_duration(text)
	if duration is not None:
		return duration
	return 0.0

#============================================

def get_cast_duration(cast_file: str) -> float:
	utils.ensure_file_exists(cast_file)
	return cast_duration_from_text(utils.read_text_file(cast_file))

#============================================

def resolve_cast_path(public_dir: str, cast_path: str) -> str:
	"""
	Map a cast reference from a timeline onto the local public directory.
	"""
	if os.path.isabs(cast_path) and os.path.isfile(cast_path):
		return cast_path
	return os.path.join(public_dir, cast_path.lstrip('/'))

#============================================

class CastDurationProbe():
	def __init__(self, public_dir: str):
		self.public_dir = public_dir
		self.cache = {}

	#============================
	def __call__(self, cast_path: str) -> float:
		if cast_path not in self.cache:
			local_path = resolve_cast_path(self.public_dir, cast_path)
			self.cache[cast_path] = get_cast_duration(local_path)
		return self.cache[cast_path]

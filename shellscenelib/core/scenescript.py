#!/usr/bin/env python3

"""
Line-oriented parser for scene scripts.

A script is one statement per line:

	timeline: demo
	card "Hello" | "a subtitle" @2s
	  say "Welcome" @0.5s voice=af_heart anchor=inEnd
	fade 10
	cast /casts/setup.cast 100x30
	  say "Now we run the installer"
	swipe left 15

Each line is offered to an ordered list of rules; the first rule that
accepts it wins. A line no rule accepts fails the whole script.
"""

import re
from shellscenelib.core import config
from shellscenelib.core.errors import ScriptSyntaxError
from shellscenelib.core.model import Card, Cast, SpeechCue, Timeline, Transition

#============================================

TIMELINE_RE = re.compile(r'^timeline\s*:\s*(.+?)\s*$', re.IGNORECASE)
FADE_RE = re.compile(r'^(fade|crossfade)\s+(\d+)\s*$', re.IGNORECASE)
SWIPE_RE = re.compile(r'^swipe\s+(left|right|up|down)\s+(\d+)\s*$', re.IGNORECASE)
CARD_RE = re.compile(
	r'^card\s+"([^"]+)"(?:\s*\|\s*"([^"]+)")?(?:\s*@\s*([\d.]+)s?)?\s*$',
	re.IGNORECASE)
CAST_RE = re.compile(r'^cast\s+(\S+)\s+(\d+)x(\d+)\s*$', re.IGNORECASE)
SAY_RE = re.compile(
	r'^\s{2,}say\s+"(.*?)"(?:\s*@\s*([\d.]+)s?)?(?:\s+voice=([a-z0-9_]+))?'
	r'(?:\s+anchor=([a-z]+))?\s*$',
	re.IGNORECASE | re.DOTALL)

#============================================

def _number(text: str):
	"""
	Parse a script number, keeping whole numbers as int.
	"""
	if re.fullmatch(r'\d+', text):
		return int(text)
	return float(text)

#============================================

class ParseState():
	def __init__(self):
		self.name = config.DEFAULTS['timeline_name']
		self.items = []
		self.current = None

	#============================
	def push_current(self) -> None:
		if self.current is not None:
			self.items.append(self.current)
		self.current = None

#============================================

def eat_blank_or_comment(state: ParseState, line: str) -> bool:
	stripped = line.strip()
	return stripped == "" or stripped.startswith("#")

#============================================

def eat_timeline(state: ParseState, line: str) -> bool:
	match = TIMELINE_RE.match(line)
	if match is None:
		return False
	state.name = match.group(1).strip()
	return True

#============================================

def eat_transition(state: ParseState, line: str) -> bool:
	match = FADE_RE.match(line)
	if match is not None:
		state.push_current()
		state.items.append(Transition(match.group(1).lower(), int(match.group(2))))
		return True
	match = SWIPE_RE.match(line)
	if match is not None:
		state.push_current()
		state.items.append(Transition('swipe', int(match.group(2)),
			direction=match.group(1).lower()))
		return True
	return False

#============================================

def eat_card(state: ParseState, line: str) -> bool:
	match = CARD_RE.match(line)
	if match is None:
		return False
	(title, subtitle, seconds_text) = match.groups()
	seconds = None
	if seconds_text is not None:
		try:
			seconds = _number(seconds_text)
		except ValueError:
			return False
	state.push_current()
	state.current = Card(title, subtitle=subtitle, seconds=seconds)
	return True

#============================================

def eat_cast(state: ParseState, line: str) -> bool:
	match = CAST_RE.match(line)
	if match is None:
		return False
	(cast_path, cols, rows) = match.groups()
	state.push_current()
	state.current = Cast(cast_path, cols=int(cols), rows=int(rows))
	return True

#============================================

def eat_say(state: ParseState, line: str) -> bool:
	if state.current is None:
		return False
	match = SAY_RE.match(line)
	if match is None:
		return False
	(text, offset_text, voice, anchor_text) = match.groups()
	anchor = None
	if anchor_text is not None:
		anchor = config.canonical_anchor(anchor_text)
		if anchor is None:
			return False
	offset_sec = None
	if offset_text is not None:
		try:
			offset_sec = _number(offset_text)
		except ValueError:
			return False
	state.current.speech.append(SpeechCue(text, voice=voice, anchor=anchor,
		offset_sec=offset_sec))
	return True

#============================================

# priority order matters: first accepting rule wins
RULES = (
	eat_blank_or_comment,
	eat_timeline,
	eat_transition,
	eat_card,
	eat_cast,
	eat_say,
)

#============================================

def normalize_lines(script_text: str) -> list:
	lines = re.split(r'\r?\n', script_text)
	return [line.replace("\t", "  ").rstrip() for line in lines]

#============================================

def parse(script_text: str) -> Timeline:
	"""
	Parse scene script text into a Timeline.

	Args:
		script_text: Full script text.

	Returns:
		Timeline: Parsed timeline with speech cues still attached.

	Raises:
		ScriptSyntaxError: On the first line that no rule accepts.
	"""
	state = ParseState()
	for line_number, line in enumerate(normalize_lines(script_text), start=1):
		accepted = False
		for rule in RULES:
			if rule(state, line):
				accepted = True
				break
		if not accepted:
			raise ScriptSyntaxError(line, line_number)
	state.push_current()
	return Timeline(state.name, state.items)

#============================================

def parse_file(script_path: str) -> Timeline:
	with open(script_path, 'r', encoding='utf-8') as handle:
		script_text = handle.read()
	return parse(script_text)

#!/usr/bin/env python3

"""
Timeline data model: tagged item variants and their JSON document shapes.
"""

from shellscenelib.core import config
from shellscenelib.core.errors import SemanticError

#============================================

def _require_number(value, key_path: str, minimum=None):
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise SemanticError(f"{key_path} must be a number")
	if minimum is not None and value < minimum:
		raise SemanticError(f"{key_path} must be >= {minimum}")
	return value

#============================================

def _require_int(value, key_path: str, minimum=None) -> int:
	if isinstance(value, float) and value.is_integer():
		value = int(value)
	if isinstance(value, bool) or not isinstance(value, int):
		raise SemanticError(f"{key_path} must be an integer")
	if minimum is not None and value < minimum:
		raise SemanticError(f"{key_path} must be >= {minimum}")
	return value

#============================================

def _require_str(value, key_path: str) -> str:
	if not isinstance(value, str):
		raise SemanticError(f"{key_path} must be a string")
	return value

#============================================

def _require_anchor(value, key_path: str) -> str:
	anchor = config.canonical_anchor(value)
	if anchor is None:
		raise SemanticError(f"{key_path} must be one of {', '.join(config.ANCHORS)}")
	return anchor

#============================================

def _require_list(data: dict, key: str, key_path: str) -> list:
	value = data.get(key)
	if value is None:
		return []
	# the player format allowed a single attachment in place of a list
	if isinstance(value, dict):
		return [value]
	if not isinstance(value, list):
		raise SemanticError(f"{key_path}.{key} must be a list")
	return value

#============================================

class SpeechCue():
	def __init__(self, text: str, voice: str = None, anchor: str = None,
		offset_sec: float = None):
		self.text = text
		self.voice = voice if voice is not None else config.DEFAULTS['voice']
		self.anchor = anchor if anchor is not None else config.DEFAULTS['anchor']
		self.offset_sec = offset_sec if offset_sec is not None else config.DEFAULTS['offset_sec']

	#============================
	def to_dict(self) -> dict:
		return {
			'text': self.text,
			'voice': self.voice,
			'anchor': self.anchor,
			'offsetSec': self.offset_sec,
		}

	#============================
	@classmethod
	def from_dict(cls, data: dict, key_path: str = "speech"):
		if not isinstance(data, dict):
			raise SemanticError(f"{key_path} must be a mapping")
		text = _require_str(data.get('text'), f"{key_path}.text")
		voice = data.get('voice')
		if voice is not None:
			voice = _require_str(voice, f"{key_path}.voice")
		anchor = data.get('anchor')
		if anchor is not None:
			anchor = _require_anchor(anchor, f"{key_path}.anchor")
		offset_sec = data.get('offsetSec')
		if offset_sec is not None:
			offset_sec = _require_number(offset_sec, f"{key_path}.offsetSec")
		return cls(text, voice=voice, anchor=anchor, offset_sec=offset_sec)

#============================================

class AudioAttachment():
	def __init__(self, src: str, anchor: str = None, offset_sec: float = None,
		volume: float = None, loop: bool = None, fade_in_sec: float = None,
		fade_out_sec: float = None, label: str = None):
		self.src = src
		# anchor stays None when omitted, the default depends on the clip kind
		self.anchor = anchor
		self.offset_sec = offset_sec if offset_sec is not None else config.DEFAULTS['offset_sec']
		self.volume = volume
		self.loop = loop
		self.fade_in_sec = fade_in_sec
		self.fade_out_sec = fade_out_sec
		self.label = label

	#============================
	def to_dict(self) -> dict:
		data = {'src': self.src}
		if self.anchor is not None:
			data['anchor'] = self.anchor
		data['offsetSec'] = self.offset_sec
		if self.volume is not None:
			data['volume'] = self.volume
		if self.loop is not None:
			data['loop'] = self.loop
		if self.fade_in_sec is not None:
			data['fadeInSec'] = self.fade_in_sec
		if self.fade_out_sec is not None:
			data['fadeOutSec'] = self.fade_out_sec
		if self.label is not None:
			data['label'] = self.label
		return data

	#============================
	@classmethod
	def from_dict(cls, data: dict, key_path: str = "audio"):
		if not isinstance(data, dict):
			raise SemanticError(f"{key_path} must be a mapping")
		src = _require_str(data.get('src'), f"{key_path}.src")
		anchor = data.get('anchor')
		if anchor is not None:
			anchor = _require_anchor(anchor, f"{key_path}.anchor")
		offset_sec = data.get('offsetSec')
		if offset_sec is not None:
			offset_sec = _require_number(offset_sec, f"{key_path}.offsetSec")
		volume = data.get('volume')
		if volume is not None:
			volume = _require_number(volume, f"{key_path}.volume", minimum=0)
			if volume > 1:
				raise SemanticError(f"{key_path}.volume must be <= 1")
		loop = data.get('loop')
		if loop is not None and not isinstance(loop, bool):
			raise SemanticError(f"{key_path}.loop must be true or false")
		fade_in_sec = data.get('fadeInSec')
		if fade_in_sec is not None:
			fade_in_sec = _require_number(fade_in_sec, f"{key_path}.fadeInSec", minimum=0)
		fade_out_sec = data.get('fadeOutSec')
		if fade_out_sec is not None:
			fade_out_sec = _require_number(fade_out_sec, f"{key_path}.fadeOutSec", minimum=0)
		label = data.get('label')
		if label is not None:
			label = _require_str(label, f"{key_path}.label")
		return cls(src, anchor=anchor, offset_sec=offset_sec, volume=volume,
			loop=loop, fade_in_sec=fade_in_sec, fade_out_sec=fade_out_sec,
			label=label)

#============================================

class Transition():
	kind = 'transition'

	def __init__(self, name: str, duration_frames: int = 0, direction: str = None,
		mode: str = None):
		self.name = name
		self.duration_frames = duration_frames
		self.direction = direction
		self.mode = mode

	#============================
	def is_overlapping(self) -> bool:
		return self.name in config.OVERLAPPING_TRANSITIONS

	#============================
	def overlap_frames(self) -> int:
		if self.is_overlapping():
			return self.duration_frames
		return 0

	#============================
	def visual_frames(self) -> int:
		if self.name == 'cut':
			return 0
		return self.duration_frames

	#============================
	def to_dict(self, with_speech: bool = True) -> dict:
		data = {
			'type': self.kind,
			'name': self.name,
			'durationFrames': self.duration_frames,
		}
		if self.direction is not None:
			data['direction'] = self.direction
		if self.mode is not None:
			data['mode'] = self.mode
		return data

	#============================
	@classmethod
	def from_dict(cls, data: dict, key_path: str = "transition"):
		name = data.get('name')
		if name not in config.TRANSITION_NAMES:
			raise SemanticError(f"{key_path}.name must be one of {', '.join(config.TRANSITION_NAMES)}")
		duration_frames = _require_int(data.get('durationFrames', 0),
			f"{key_path}.durationFrames", minimum=0)
		direction = data.get('direction')
		if direction is not None and direction not in config.DIRECTIONS:
			raise SemanticError(f"{key_path}.direction must be one of {', '.join(config.DIRECTIONS)}")
		mode = data.get('mode')
		if mode is not None and mode not in config.FADE_MODES:
			raise SemanticError(f"{key_path}.mode must be one of {', '.join(config.FADE_MODES)}")
		return cls(name, duration_frames, direction=direction, mode=mode)

#============================================

class Clip():
	"""
	Shared behavior of the timeline items that occupy screen time.
	"""
	kind = None

	def __init__(self, speech: list = None, audio: list = None):
		self.speech = list(speech) if speech is not None else []
		self.audio = list(audio) if audio is not None else []

	#============================
	def default_audio_anchor(self) -> str:
		return config.DEFAULTS[f"{self.kind}_audio_anchor"]

	#============================
	def display_title(self) -> str:
		raise NotImplementedError

	#============================
	def _cue_fields(self, data: dict, with_speech: bool) -> dict:
		if with_speech:
			data['speech'] = [cue.to_dict() for cue in self.speech]
		data['audio'] = [attachment.to_dict() for attachment in self.audio]
		return data

	#============================
	@staticmethod
	def _parse_cues(data: dict, key_path: str) -> tuple:
		speech = []
		for index, cue in enumerate(_require_list(data, 'speech', key_path)):
			speech.append(SpeechCue.from_dict(cue, f"{key_path}.speech[{index}]"))
		audio = []
		for index, attachment in enumerate(_require_list(data, 'audio', key_path)):
			audio.append(AudioAttachment.from_dict(attachment, f"{key_path}.audio[{index}]"))
		return (speech, audio)

#============================================

class Card(Clip):
	kind = 'card'

	def __init__(self, title: str, subtitle: str = None, seconds: float = None,
		speech: list = None, audio: list = None):
		super().__init__(speech=speech, audio=audio)
		self.title = title
		self.subtitle = subtitle
		self.seconds = seconds if seconds is not None else config.DEFAULTS['card_seconds']

	#============================
	def display_title(self) -> str:
		return self.title or "(untitled)"

	#============================
	def to_dict(self, with_speech: bool = True) -> dict:
		data = {
			'type': self.kind,
			'title': self.title,
		}
		if self.subtitle is not None:
			data['subtitle'] = self.subtitle
		data['seconds'] = self.seconds
		return self._cue_fields(data, with_speech)

	#============================
	@classmethod
	def from_dict(cls, data: dict, key_path: str = "card"):
		title = _require_str(data.get('title'), f"{key_path}.title")
		subtitle = data.get('subtitle')
		if subtitle is not None:
			subtitle = _require_str(subtitle, f"{key_path}.subtitle")
		seconds = data.get('seconds')
		if seconds is not None:
			seconds = _require_number(seconds, f"{key_path}.seconds", minimum=0)
		(speech, audio) = cls._parse_cues(data, key_path)
		return cls(title, subtitle=subtitle, seconds=seconds, speech=speech, audio=audio)

#============================================

class Cast(Clip):
	kind = 'cast'

	def __init__(self, path: str, cols: int = None, rows: int = None,
		speech: list = None, audio: list = None):
		super().__init__(speech=speech, audio=audio)
		self.path = path
		self.cols = cols
		self.rows = rows

	#============================
	def display_title(self) -> str:
		return self.path or "(cast)"

	#============================
	def to_dict(self, with_speech: bool = True) -> dict:
		data = {
			'type': self.kind,
			'castPath': self.path,
		}
		if self.cols is not None:
			data['cols'] = self.cols
		if self.rows is not None:
			data['rows'] = self.rows
		return self._cue_fields(data, with_speech)

	#============================
	@classmethod
	def from_dict(cls, data: dict, key_path: str = "cast"):
		path = data.get('castPath', data.get('path'))
		path = _require_str(path, f"{key_path}.castPath")
		cols = data.get('cols')
		if cols is not None:
			cols = _require_int(cols, f"{key_path}.cols", minimum=1)
		rows = data.get('rows')
		if rows is not None:
			rows = _require_int(rows, f"{key_path}.rows", minimum=1)
		(speech, audio) = cls._parse_cues(data, key_path)
		return cls(path, cols=cols, rows=rows, speech=speech, audio=audio)

#============================================

ITEM_TYPES = {
	Transition.kind: Transition,
	Card.kind: Card,
	Cast.kind: Cast,
}

#============================================

def item_from_dict(data: dict, key_path: str = "item"):
	if not isinstance(data, dict):
		raise SemanticError(f"{key_path} must be a mapping")
	item_type = data.get('type')
	item_class = ITEM_TYPES.get(item_type)
	if item_class is None:
		raise SemanticError(f"{key_path}.type must be transition, card, or cast, not {item_type!r}")
	return item_class.from_dict(data, key_path)

#============================================

def is_clip(item) -> bool:
	if isinstance(item, (Card, Cast)):
		return True
	if isinstance(item, Transition):
		return False
	raise SemanticError(f"unsupported timeline item {type(item).__name__}")

#============================================

class Timeline():
	def __init__(self, name: str = None, items: list = None):
		self.name = name
		self.items = list(items) if items is not None else []

	#============================
	def clips(self) -> list:
		"""
		Return (position, item) pairs for the card and cast items, in order.
		"""
		return [(index, item) for index, item in enumerate(self.items) if is_clip(item)]

	#============================
	def to_dict(self, with_speech: bool = True) -> dict:
		return {
			'name': self.name,
			'items': [item.to_dict(with_speech=with_speech) for item in self.items],
		}

	#============================
	@classmethod
	def from_dict(cls, data: dict):
		if not isinstance(data, dict):
			raise SemanticError("timeline document must be a mapping with name and items")
		name = data.get('name')
		if not isinstance(name, str) or name.strip() == "":
			raise SemanticError("timeline document requires a non-empty name")
		items = data.get('items')
		if not isinstance(items, list):
			raise SemanticError("timeline document requires an items list")
		parsed = []
		for index, item in enumerate(items):
			parsed.append(item_from_dict(item, f"items[{index}]"))
		return cls(name, parsed)

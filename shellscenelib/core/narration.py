#!/usr/bin/env python3

import hashlib
import json
import os
import re
from shellscenelib.core import config
from shellscenelib.core import utils
from shellscenelib.core.errors import SemanticError
from shellscenelib.core.model import AudioAttachment, Timeline, Transition, is_clip

#============================================

def compile_pronunciation(table: list = None) -> list:
	if table is None:
		table = config.DEFAULT_PRONUNCIATION
	compiled = []
	for (pattern, replacement) in table:
		regex = re.compile(r'(?<!\w)' + re.escape(pattern) + r'(?!\w)', re.IGNORECASE)
		compiled.append((regex, replacement))
	return compiled

#============================================

def apply_pronunciation(text: str, compiled: list = None) -> str:
	if compiled is None:
		compiled = compile_pronunciation()
	for (regex, replacement) in compiled:
		# replacements are literal text, never regex templates
		text = regex.sub(lambda match, value=replacement: value, text)
	return text

#============================================

def hash_key(voice: str, text: str) -> str:
	digest = hashlib.sha1(f"{voice}::{text}".encode("utf-8")).hexdigest()
	return digest[:16]

#============================================

def check_timeline_name(name) -> str:
	"""
	Reject names that are empty or would leave the public directory.
	"""
	if not isinstance(name, str) or name.strip() == "":
		raise SemanticError("timeline has no name")
	if os.path.isabs(name) or "/" in name or "\\" in name or ".." in name:
		raise SemanticError(f"timeline name must be a plain file name: {name!r}")
	return name

#============================================

def sanitize_base(text: str) -> str:
	base = re.sub(r'[^a-z0-9\-_]+', "-", text, flags=re.IGNORECASE)
	base = re.sub(r'-+', "-", base)
	return base.strip("-")

#============================================

def asset_basename(text: str, voice: str) -> str:
	"""
	Cache file stem for a normalized cue: slug, voice and content key.
	"""
	slug = sanitize_base(text)[:48] or "tts"
	return f"{slug}-{voice}-{hash_key(voice, text)}"

#============================================

def _preview(text: str, width: int = 42) -> str:
	if len(text) > width:
		return text[:width] + "…"
	return text

#============================================

def document_text(data: dict) -> str:
	return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

#============================================

def timeline_module_text(name: str, items: list, title: str = None) -> str:
	"""
	Self-registering script module exposing one compiled timeline.
	"""
	if title is None:
		title = name
	name_json = json.dumps(name, ensure_ascii=False)
	title_json = json.dumps(title, ensure_ascii=False)
	items_json = json.dumps(items, indent=2, ensure_ascii=False)
	lines = []
	lines.append(f"// AUTO-GENERATED for timeline {name_json} - DO NOT EDIT")
	lines.append(f"export const name = {name_json};")
	lines.append(f"export const timeline = {items_json};")
	lines.append("if (typeof globalThis !== \"undefined\") {")
	lines.append("  const root = (globalThis.shellScene ??= {});")
	lines.append("  if (typeof root.registerTimeline === \"function\") {")
	lines.append(f"    root.registerTimeline(name, timeline, {title_json});")
	lines.append("  } else {")
	lines.append("    (root.__timelines ??= {})[name] = timeline;")
	lines.append(f"    (root.__titles ??= {{}})[name] = {title_json};")
	lines.append("  }")
	lines.append("}")
	return "\n".join(lines) + "\n"

#============================================

def module_reference(name: str) -> str:
	return f"/timelines/{name}.speech.js"

#============================================

def build_registry(names) -> dict:
	ordered = sorted(names)
	return {
		'names': ordered,
		'modules': [module_reference(name) for name in ordered],
		'titles': {name: name for name in ordered},
	}

#============================================

class NarrationBuilder():
	"""
	Turn a timeline's speech cues into cached, encoded audio attachments.

	Assets land under <public>/speech/<timeline>/ and the compiled timeline
	is written to <public>/timelines/<timeline>.json plus a script module.
	"""
	def __init__(self, public_dir: str, engine, encoder, pronunciation: list = None):
		self.public_dir = public_dir
		self.engine = engine
		self.encoder = encoder
		self.pronunciation = compile_pronunciation(pronunciation)
		self.speech_root = os.path.join(public_dir, "speech")
		self.timelines_dir = os.path.join(public_dir, "timelines")
		self.synthesized_count = 0
		self.encoded_count = 0
		self.cached_count = 0

	#============================
	def build(self, timeline: Timeline) -> tuple:
		"""
		Build narration assets for one timeline and write its outputs.

		Args:
			timeline: Parsed timeline with speech cues.

		Returns:
			tuple: (compiled Timeline, compiled document dict).
		"""
		name = check_timeline_name(timeline.name)
		speech_dir = utils.ensure_dir(os.path.join(self.speech_root, name))
		utils.ensure_dir(self.timelines_dir)
		compiled_items = []
		for item in timeline.items:
			if isinstance(item, Transition):
				compiled_items.append(Transition.from_dict(item.to_dict()))
				continue
			if not is_clip(item):
				raise SemanticError(f"malformed timeline item in {name}")
			compiled = type(item).from_dict(item.to_dict(with_speech=False))
			for cue in item.speech:
				compiled.audio.append(self.cue_attachment(name, speech_dir, cue))
			compiled_items.append(compiled)
		compiled_timeline = Timeline(name, compiled_items)
		document = compiled_timeline.to_dict(with_speech=False)
		self.write_outputs(name, document)
		return (compiled_timeline, document)

	#============================
	def cue_attachment(self, name: str, speech_dir: str, cue) -> AudioAttachment:
		text = apply_pronunciation(cue.text, self.pronunciation)
		voice = cue.voice
		basename = asset_basename(text, voice)
		wav_file = os.path.join(speech_dir, f"{basename}.wav")
		out_file = os.path.join(speech_dir, f"{basename}.{self.encoder.ext}")
		public_ref = f"speech/{name}/{basename}.{self.encoder.ext}"
		if os.path.isfile(out_file):
			self.cached_count += 1
		else:
			if not os.path.isfile(wav_file):
				utils.print_status(f"[speech:{name}] TTS {voice} \"{_preview(text)}\"")
				self.engine.synthesize(text, voice, wav_file)
				self.synthesized_count += 1
			self.encoder.encode(wav_file, out_file)
			self.encoded_count += 1
			self._remove_intermediate(name, wav_file)
		return AudioAttachment(public_ref, anchor=cue.anchor, offset_sec=cue.offset_sec)

	#============================
	def _remove_intermediate(self, name: str, wav_file: str) -> None:
		try:
			os.remove(wav_file)
		except OSError as error:
			utils.print_warning(f"[speech:{name}] warning: could not delete {wav_file}: {error}")
			return
		utils.print_status(f"[speech:{name}] cleaned up {os.path.basename(wav_file)}")

	#============================
	def write_outputs(self, name: str, document: dict) -> None:
		json_file = os.path.join(self.timelines_dir, f"{name}.json")
		module_file = os.path.join(self.timelines_dir, f"{name}.speech.js")
		utils.write_text_file(json_file, document_text(document))
		utils.write_text_file(module_file, timeline_module_text(name, document['items']))
		utils.print_status(f"[speech:{name}] wrote timelines/{name}.{{json,speech.js}}")

	#============================
	def remove_outputs(self, name: str) -> None:
		"""
		Delete compiled outputs left by an earlier run of a timeline.
		"""
		check_timeline_name(name)
		for suffix in (".json", ".speech.js"):
			stale_file = os.path.join(self.timelines_dir, f"{name}{suffix}")
			if not os.path.isfile(stale_file):
				continue
			try:
				os.remove(stale_file)
			except OSError as error:
				utils.print_warning(f"[speech:{name}] warning: could not delete {stale_file}: {error}")
				continue
			utils.print_status(f"[speech:{name}] removed stale timelines/{name}{suffix}")

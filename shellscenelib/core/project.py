#!/usr/bin/env python3

import os
from tqdm import tqdm
from shellscenelib.core import config
from shellscenelib.core import narration
from shellscenelib.core import scenescript
from shellscenelib.core import utils
from shellscenelib.core.errors import AssetError, SemanticError
from shellscenelib.media.ffmpeg_encode import SpeechEncoder
from shellscenelib.media.speech import EngineHandle, KokoroSynthesizer

SCRIPT_EXTENSION = ".timeline"

#============================================

class BuildResult():
	def __init__(self):
		self.built = []
		self.failed = {}
		self.registry = None

	#============================
	@property
	def status(self) -> int:
		if len(self.failed) > 0:
			return 1
		return 0

#============================================

class SceneBuild():
	def __init__(self, timelines_dir: str = None, public_dir: str = None,
		settings: dict = None, engine: EngineHandle = None,
		encoder: SpeechEncoder = None, dry_run: bool = False):
		if settings is None:
			settings = config.build_settings()
		self.settings = settings
		self.timelines_dir = timelines_dir or settings['paths']['timelines_dir']
		self.public_dir = public_dir or settings['paths']['public_dir']
		self.dry_run = dry_run
		speech = settings['speech']
		if engine is None:
			engine = EngineHandle(lambda: KokoroSynthesizer(speech['model_id'],
				speech['sample_rate']))
		self.engine = engine
		if encoder is None:
			encoder = SpeechEncoder(speech['format'], speech['ffmpeg'])
		self.encoder = encoder
		self.builder = narration.NarrationBuilder(self.public_dir, self.engine,
			self.encoder, pronunciation=settings['pronunciation'])
		self.registry_file = os.path.join(self.public_dir, "timelines", "registry.json")

	#============================
	def discover_scripts(self) -> list:
		if not os.path.isdir(self.timelines_dir):
			raise RuntimeError(f"timelines directory not found: {self.timelines_dir}")
		scripts = []
		for filename in sorted(os.listdir(self.timelines_dir)):
			if filename.lower().endswith(SCRIPT_EXTENSION):
				scripts.append(os.path.join(self.timelines_dir, filename))
		return scripts

	#============================
	def run(self) -> BuildResult:
		"""
		Build every script, isolating failures per timeline.

		A missing encoder aborts the whole run; any other error only fails
		the timeline it came from. The registry lists the successes.
		"""
		utils.print_status("[speech] building speech assets for all timelines")
		scripts = self.discover_scripts()
		result = BuildResult()
		seen_names = set()
		if utils.is_quiet_mode():
			script_iter = scripts
		else:
			script_iter = tqdm(scripts, unit="timeline")
		for script_file in script_iter:
			try:
				name = self.build_script(script_file, seen_names)
			except AssetError:
				raise
			except Exception as error:
				utils.print_error(
					f"[speech] failed building {os.path.basename(script_file)}: {error}")
				result.failed[script_file] = str(error)
				continue
			result.built.append(name)
		if self.dry_run:
			utils.print_status("dry run: validation complete")
			return result
		result.registry = self.write_registry(result.built)
		if result.status == 0:
			utils.print_status("[speech] OK")
		return result

	#============================
	def build_script(self, script_file: str, seen_names: set) -> str:
		timeline = scenescript.parse_file(script_file)
		name = narration.check_timeline_name(timeline.name)
		if name in seen_names:
			raise SemanticError(f"duplicate timeline name: {name}")
		seen_names.add(name)
		if self.dry_run:
			return name
		try:
			self.builder.build(timeline)
		except Exception:
			# a failed timeline must not leave an older build behind
			self.builder.remove_outputs(name)
			raise
		return name

	#============================
	def write_registry(self, names: list) -> dict:
		registry = narration.build_registry(names)
		utils.ensure_dir(os.path.dirname(self.registry_file))
		utils.write_text_file(self.registry_file, narration.document_text(registry))
		utils.print_status(f"[speech] wrote {self.registry_file}")
		return registry

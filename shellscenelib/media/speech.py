#!/usr/bin/env python3

import numpy
from shellscenelib.core import config
from shellscenelib.core import utils

#============================================

class KokoroSynthesizer():
	"""
	Text-to-speech through the Kokoro model, writing mono wav files.
	"""
	def __init__(self, model_id: str = None, sample_rate: int = None):
		self.model_id = model_id or config.DEFAULTS['model_id']
		self.sample_rate = sample_rate or config.DEFAULTS['sample_rate']
		self.pipelines = {}

	#============================
	def _pipeline(self, voice: str):
		# kokoro voice ids start with their language code, e.g. af_heart -> a
		lang_code = voice[0].lower()
		if lang_code not in self.pipelines:
			# heavy import, only needed once a cue misses the cache
			from kokoro import KPipeline
			utils.print_status(f"[speech] loading {self.model_id} (lang {lang_code})")
			self.pipelines[lang_code] = KPipeline(lang_code=lang_code,
				repo_id=self.model_id)
		return self.pipelines[lang_code]

	#============================
	def synthesize(self, text: str, voice: str, wav_file: str) -> str:
		import soundfile
		pipeline = self._pipeline(voice)
		chunks = []
		for (_graphemes, _phonemes, audio) in pipeline(text, voice=voice):
			if audio is None:
				continue
			chunks.append(numpy.asarray(audio, dtype=numpy.float32))
		if len(chunks) == 0:
			raise RuntimeError(f"speech synthesis produced no audio for voice {voice}")
		samples = numpy.concatenate(chunks)
		soundfile.write(wav_file, samples, self.sample_rate)
		utils.ensure_file_exists(wav_file)
		return wav_file

#============================================

class EngineHandle():
	"""
	Create the synthesis engine on first use and hold it for the run.
	"""
	def __init__(self, factory=None):
		self.factory = factory
		self.engine = None
		self.created_count = 0

	#============================
	def get(self):
		if self.engine is None:
			if self.factory is None:
				self.engine = KokoroSynthesizer()
			else:
				self.engine = self.factory()
			self.created_count += 1
		return self.engine

	#============================
	def synthesize(self, text: str, voice: str, wav_file: str) -> str:
		return self.get().synthesize(text, voice, wav_file)

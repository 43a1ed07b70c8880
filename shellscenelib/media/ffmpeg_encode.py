#!/usr/bin/env python3

import os
from shellscenelib.core import utils
from shellscenelib.core.errors import AssetError

#============================================

ENCODER_PROFILES = {
	'opus': {
		'ext': "opus",
		'args': ["-c:a", "libopus", "-b:a", "96k", "-vbr", "on"],
	},
	'vorbis': {
		'ext': "ogg",
		'args': ["-c:a", "libvorbis", "-q:a", "5"],
	},
}

#============================================

def encoder_profile(speech_format: str) -> dict:
	profile = ENCODER_PROFILES.get(speech_format)
	if profile is None:
		raise RuntimeError(f"unsupported speech format: {speech_format}")
	return profile

#============================================

class SpeechEncoder():
	"""
	Transcode raw speech wav files with ffmpeg.
	"""
	def __init__(self, speech_format: str = "opus", ffmpeg_bin: str = None):
		self.profile = encoder_profile(speech_format)
		self.ext = self.profile['ext']
		self.ffmpeg_override = ffmpeg_bin
		self.ffmpeg_bin = None

	#============================
	def resolve_binary(self) -> str:
		if self.ffmpeg_bin is None:
			found = utils.find_command("ffmpeg", self.ffmpeg_override)
			if found is None:
				raise AssetError("ffmpeg binary not found; install ffmpeg or set FFMPEG_PATH")
			self.ffmpeg_bin = found
		return self.ffmpeg_bin

	#============================
	def build_command(self, wav_file: str, out_file: str) -> list:
		cmd = [self.resolve_binary(), "-y", "-i", wav_file]
		cmd += self.profile['args']
		cmd.append(out_file)
		return cmd

	#============================
	def encode(self, wav_file: str, out_file: str) -> str:
		utils.ensure_file_exists(wav_file)
		utils.run_process(self.build_command(wav_file, out_file))
		if not os.path.isfile(out_file):
			raise RuntimeError(f"encode speech failed: {out_file}")
		return out_file

#!/usr/bin/env python3

import math
import os
import shlex
import shutil
import subprocess
import sys
from decimal import Decimal
from fractions import Fraction

#============================================

_QUIET_MODE = False

#============================================

def set_quiet_mode(value: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(value)
	return

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def print_status(message: str) -> None:
	if is_quiet_mode():
		return
	print(message)

#============================================

def print_warning(message: str) -> None:
	sys.stderr.write(f"{message}\n")

#============================================

def print_error(message: str) -> None:
	sys.stderr.write(f"{message}\n")

#============================================

def run_process(cmd: list, cwd: str = None,
	capture_output: bool = True) -> subprocess.CompletedProcess:
	"""
	Run a subprocess command, raising on a non-zero exit status.

	Args:
		cmd: Command list to execute.
		cwd: Working directory.
		capture_output: Capture stdout and stderr when True.

	Returns:
		subprocess.CompletedProcess: Completed process.
	"""
	showcmd = shlex.join(cmd)
	print_status(f"CMD: '{showcmd}'")
	proc = subprocess.run(cmd, cwd=cwd, capture_output=capture_output, text=True)
	if proc.returncode != 0:
		stderr_text = ""
		if proc.stderr is not None:
			stderr_text = proc.stderr.strip()
		raise RuntimeError(f"command failed: {showcmd}\n{stderr_text}")
	return proc

#============================================

def find_command(cmd_name: str, override: str = None) -> str:
	"""
	Locate an external command, preferring an explicit override path.

	Returns None when the command cannot be found.
	"""
	if override is not None and override.strip() != "":
		if os.path.isfile(override):
			return override
		return shutil.which(override)
	return shutil.which(cmd_name)

#============================================

def parse_fps(raw_fps) -> Fraction:
	if raw_fps is None:
		raise RuntimeError("profile.fps is required")
	if isinstance(raw_fps, bool):
		raise RuntimeError("profile.fps must be int, float, or fraction string")
	if isinstance(raw_fps, int):
		fps = Fraction(raw_fps, 1)
	elif isinstance(raw_fps, float):
		fps = Fraction(str(raw_fps))
	elif isinstance(raw_fps, Fraction):
		fps = raw_fps
	elif isinstance(raw_fps, str):
		try:
			if '/' in raw_fps:
				parts = raw_fps.split('/')
				fps = Fraction(int(parts[0]), int(parts[1]))
			else:
				fps = Fraction(raw_fps)
		except (ValueError, ZeroDivisionError, IndexError) as error:
			raise RuntimeError(f"profile.fps is not a valid frame rate: {raw_fps!r}") from error
	else:
		raise RuntimeError("profile.fps must be int, float, or fraction string")
	if fps <= 0:
		raise RuntimeError("profile.fps must be positive")
	return fps

#============================================

def round_half_up_fraction(value: Fraction) -> int:
	numerator = value.numerator
	denominator = value.denominator
	whole = numerator // denominator
	remainder = numerator - (whole * denominator)
	if remainder * 2 >= denominator:
		return whole + 1
	return whole

#============================================

def frames_from_seconds(seconds, fps) -> int:
	"""
	Convert seconds to a frame count, rounding halves toward positive infinity.
	"""
	seconds_fraction = Fraction(str(Decimal(str(seconds))))
	frame_fraction = seconds_fraction * Fraction(fps)
	return round_half_up_fraction(frame_fraction)

#============================================

def ceil_frames_from_seconds(seconds, fps) -> int:
	seconds_fraction = Fraction(str(Decimal(str(seconds))))
	return math.ceil(seconds_fraction * Fraction(fps))

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise RuntimeError(f"file not found: {filepath}")
	return

#============================================

def ensure_dir(dirpath: str) -> str:
	os.makedirs(dirpath, exist_ok=True)
	return dirpath

#============================================

def write_text_file(path: str, text: str) -> None:
	with open(path, 'w', encoding='utf-8') as handle:
		handle.write(text)
	return

#============================================

def read_text_file(path: str) -> str:
	with open(path, 'r', encoding='utf-8') as handle:
		return handle.read()

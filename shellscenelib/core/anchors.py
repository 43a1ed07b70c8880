#!/usr/bin/env python3

from shellscenelib.core import utils

#============================================

class ClipGeometry():
	def __init__(self, start: int, in_duration_frames: int, base_frames: int,
		duration: int):
		self.start = start
		self.in_duration_frames = in_duration_frames
		self.base_frames = base_frames
		self.duration = duration

#============================================

def anchor_frame(geometry, anchor: str) -> int:
	"""
	Resolve an anchor name to a frame on the composition timeline.

	The absolute anchor resolves to the composition origin so the caller
	adds its offset directly. Unrecognized anchors fall back to clip start.
	"""
	if anchor == 'inBegin':
		return geometry.start
	if anchor == 'inEnd':
		return geometry.start + geometry.in_duration_frames
	if anchor == 'outBegin':
		return geometry.start + geometry.base_frames
	if anchor == 'outEnd':
		return geometry.start + geometry.duration
	if anchor == 'absolute':
		return 0
	return geometry.start

#============================================

def cue_frame(geometry, anchor: str, offset_sec, fps) -> int:
	if offset_sec is None:
		offset_sec = 0
	return anchor_frame(geometry, anchor) + utils.frames_from_seconds(offset_sec, fps)

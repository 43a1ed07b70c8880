#!/usr/bin/env python3

import bisect
from shellscenelib.core import utils
from shellscenelib.core.model import Card, Cast, Transition

#============================================

class ClipNode():
	"""
	Absolute placement of one card or cast for a single scheduling pass.
	"""
	def __init__(self, source_index: int, item, base_frames: int,
		in_transition, out_transition, in_overlap_frames: int,
		out_overlap_frames: int, start: int):
		self.source_index = source_index
		self.item = item
		self.kind = item.kind
		self.base_frames = base_frames
		self.in_transition = in_transition
		self.out_transition = out_transition
		self.in_overlap_frames = in_overlap_frames
		self.out_overlap_frames = out_overlap_frames
		self.in_duration_frames = 0
		if in_transition is not None:
			self.in_duration_frames = in_transition.visual_frames()
		self.out_duration_frames = 0
		if out_transition is not None:
			self.out_duration_frames = out_transition.visual_frames()
		self.start = start
		self.duration = max(1, base_frames + out_overlap_frames)

	#============================
	def visible_start(self) -> int:
		"""
		First frame after the incoming transition, using its stated length.
		"""
		if self.in_transition is None:
			return self.start
		return self.start + self.in_transition.duration_frames

	#============================
	def end(self) -> int:
		return self.start + self.base_frames

#============================================

def _transition_positions(items: list) -> list:
	positions = []
	for index, item in enumerate(items):
		if isinstance(item, Transition):
			positions.append(index)
		elif not isinstance(item, (Card, Cast)):
			raise RuntimeError(f"unsupported timeline item at {index}: {type(item).__name__}")
	return positions

#============================================

def nearest_previous_transition(items: list, positions: list, position: int):
	index = bisect.bisect_left(positions, position) - 1
	if index < 0:
		return None
	return items[positions[index]]

#============================================

def last_transition_between(items: list, positions: list, first: int, last):
	"""
	Return the transition strictly between two item positions that sits
	closest to the later one, or None.
	"""
	if last is None:
		index = len(positions) - 1
	else:
		index = bisect.bisect_left(positions, last) - 1
	if index < 0 or positions[index] <= first:
		return None
	return items[positions[index]]

#============================================

def layout(timeline, base_frames: list) -> list:
	"""
	Place each clip of a timeline on absolute frames.

	Args:
		timeline: Timeline to schedule.
		base_frames: Nominal frame count per clip, aligned with the card and
			cast items in timeline order.

	Returns:
		list: ClipNode per clip, in timeline order.
	"""
	items = timeline.items
	clip_entries = timeline.clips()
	if len(base_frames) != len(clip_entries):
		raise RuntimeError(
			f"expected {len(clip_entries)} clip frame counts, got {len(base_frames)}"
		)
	positions = _transition_positions(items)
	clips = []
	current = 0
	previous_overlap = 0
	for k, (position, item) in enumerate(clip_entries):
		next_position = None
		if k + 1 < len(clip_entries):
			next_position = clip_entries[k + 1][0]
		in_transition = nearest_previous_transition(items, positions, position)
		out_transition = last_transition_between(items, positions, position, next_position)
		out_overlap = 0
		if out_transition is not None:
			out_overlap = out_transition.overlap_frames()
		clip_frames = max(1, int(base_frames[k]))
		node = ClipNode(position, item, clip_frames, in_transition, out_transition,
			previous_overlap, out_overlap, current)
		clips.append(node)
		current = node.start + clip_frames - out_overlap
		previous_overlap = out_overlap
	return clips

#============================================

def schedule_frames(clips: list) -> int:
	"""
	Total composition length: base frames minus overlaps between neighbors.
	"""
	total_base = sum(clip.base_frames for clip in clips)
	total_overlap = sum(clip.in_overlap_frames for clip in clips)
	return max(1, total_base - total_overlap)

#============================================

def chapters(clips: list) -> list:
	result = []
	for clip in clips:
		if clip.kind != 'card':
			continue
		result.append({
			'title': clip.item.display_title(),
			'frame': clip.visible_start(),
		})
	return result

#============================================

def chapter_at(chapter_frames: list, frame: int) -> int:
	"""
	Index of the last chapter starting at or before frame, or -1.
	"""
	return bisect.bisect_right(chapter_frames, frame) - 1

#============================================

def clip_ranges(clips: list) -> list:
	ranges = []
	for clip in clips:
		ranges.append({
			'kind': clip.kind,
			'title': clip.item.display_title(),
			'start': clip.start,
			'visibleStart': clip.visible_start(),
			'end': clip.end(),
		})
	return ranges

#============================================

def clip_base_frames(timeline, fps, probe=None) -> list:
	"""
	Nominal frames per clip: card seconds, or the probed cast duration.

	Args:
		timeline: Timeline whose clips are measured.
		fps: Frames per second.
		probe: Callable returning a cast's duration in seconds.

	Returns:
		list: Frame counts aligned with timeline.clips().
	"""
	frames = []
	for (_position, item) in timeline.clips():
		if isinstance(item, Card):
			seconds = item.seconds
		else:
			if probe is None:
				raise RuntimeError(f"cast {item.path} needs a duration probe")
			seconds = probe(item.path)
		frames.append(max(1, utils.ceil_frames_from_seconds(seconds, fps)))
	return frames

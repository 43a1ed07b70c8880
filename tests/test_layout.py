#!/usr/bin/env python3

"""
Unit tests for clip placement on the composition timeline.
"""

# Standard Library
import os
import sys
import unittest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from shellscenelib.core import layout
from shellscenelib.core.model import Card, Cast, Timeline, Transition

#============================================

def _timeline(*items) -> Timeline:
	return Timeline("layout", list(items))

#============================================

class LayoutTest(unittest.TestCase):
	def test_swipe_overlaps_neighbors(self):
		timeline = _timeline(Card("A"), Transition('swipe', 15, direction='right'), Card("B"))
		clips = layout.layout(timeline, [60, 90])
		self.assertEqual(clips[0].start, 0)
		self.assertEqual(clips[0].duration, 75)
		self.assertEqual(clips[1].start, 45)
		self.assertEqual(clips[1].in_overlap_frames, 15)
		self.assertEqual(layout.schedule_frames(clips), 135)

	def test_fade_does_not_overlap(self):
		timeline = _timeline(Card("A"), Transition('fade', 10), Card("B"))
		clips = layout.layout(timeline, [60, 90])
		self.assertEqual(clips[0].duration, 60)
		self.assertEqual(clips[1].start, 60)
		self.assertEqual(clips[1].in_duration_frames, 10)
		self.assertEqual(clips[1].visible_start(), 70)
		self.assertEqual(layout.schedule_frames(clips), 150)

	def test_cut_has_no_visual_length(self):
		timeline = _timeline(Card("A"), Transition('cut', 10), Card("B"))
		clips = layout.layout(timeline, [30, 30])
		self.assertEqual(clips[1].start, 30)
		self.assertEqual(clips[1].in_duration_frames, 0)
		self.assertEqual(clips[0].out_duration_frames, 0)
		self.assertEqual(layout.schedule_frames(clips), 60)

	def test_mixed_sequence_totals(self):
		timeline = _timeline(
			Card("A"),
			Transition('crossfade', 20),
			Card("B"),
			Transition('fade', 5),
			Cast("/casts/c.cast", 80, 24),
			Transition('swipe', 10, direction='left'),
			Card("D"),
		)
		clips = layout.layout(timeline, [100, 80, 60, 40])
		self.assertEqual([clip.start for clip in clips], [0, 80, 160, 210])
		self.assertEqual([clip.duration for clip in clips], [120, 80, 70, 40])
		self.assertEqual([clip.source_index for clip in clips], [0, 2, 4, 6])
		self.assertEqual(layout.schedule_frames(clips), 250)
		# each clip starts at the previous base end minus the shared overlap
		for (current, following) in zip(clips, clips[1:]):
			self.assertEqual(following.start, current.end() - current.out_overlap_frames)
			self.assertEqual(following.in_overlap_frames, current.out_overlap_frames)

	def test_transition_closest_to_next_clip_sets_overlap(self):
		timeline = _timeline(Card("A"), Transition('fade', 5), Transition('crossfade', 12), Card("B"))
		clips = layout.layout(timeline, [50, 50])
		self.assertEqual(clips[0].out_transition.name, 'crossfade')
		self.assertEqual(clips[1].in_transition.name, 'crossfade')
		self.assertEqual(clips[1].start, 38)
		self.assertEqual(layout.schedule_frames(clips), 88)

	def test_trailing_fade_wins_over_earlier_crossfade(self):
		timeline = _timeline(Card("A"), Transition('crossfade', 12), Transition('fade', 5), Card("B"))
		clips = layout.layout(timeline, [50, 50])
		self.assertEqual(clips[0].out_transition.name, 'fade')
		self.assertEqual(clips[0].duration, 50)
		self.assertEqual(clips[1].start, 50)

	def test_leading_transition_is_incoming_only(self):
		timeline = _timeline(Transition('fade', 8), Card("A"), Card("B"))
		clips = layout.layout(timeline, [30, 30])
		self.assertEqual(clips[0].in_duration_frames, 8)
		self.assertIsNone(clips[0].out_transition)
		self.assertEqual(clips[1].start, 30)
		self.assertEqual(layout.schedule_frames(clips), 60)

	def test_trailing_overlap_extends_last_clip_only(self):
		timeline = _timeline(Card("A"), Transition('crossfade', 10))
		clips = layout.layout(timeline, [40])
		self.assertEqual(clips[0].duration, 50)
		self.assertEqual(layout.schedule_frames(clips), 40)

	def test_zero_base_frames_clamped(self):
		timeline = _timeline(Card("A", seconds=0))
		clips = layout.layout(timeline, [0])
		self.assertEqual(clips[0].base_frames, 1)
		self.assertEqual(clips[0].duration, 1)
		self.assertEqual(layout.schedule_frames(clips), 1)

	def test_empty_timeline_has_one_frame(self):
		clips = layout.layout(_timeline(), [])
		self.assertEqual(clips, [])
		self.assertEqual(layout.schedule_frames(clips), 1)

	def test_frame_count_mismatch_raises(self):
		timeline = _timeline(Card("A"), Card("B"))
		with self.assertRaises(RuntimeError):
			layout.layout(timeline, [30])

#============================================

class ChapterTest(unittest.TestCase):
	def _clips(self):
		timeline = _timeline(
			Card("Intro"),
			Transition('swipe', 15, direction='right'),
			Cast("/casts/x.cast", 80, 24),
			Transition('fade', 10),
			Card("Outro"),
		)
		return layout.layout(timeline, [60, 90, 30])

	def test_chapters_are_cards_at_visible_start(self):
		chapters = layout.chapters(self._clips())
		self.assertEqual(chapters, [
			{'title': "Intro", 'frame': 0},
			{'title': "Outro", 'frame': 145},
		])

	def test_chapter_at(self):
		frames = [chapter['frame'] for chapter in layout.chapters(self._clips())]
		self.assertEqual(layout.chapter_at(frames, 0), 0)
		self.assertEqual(layout.chapter_at(frames, 144), 0)
		self.assertEqual(layout.chapter_at(frames, 145), 1)
		self.assertEqual(layout.chapter_at(frames, 9999), 1)
		self.assertEqual(layout.chapter_at([10, 20], 5), -1)
		self.assertEqual(layout.chapter_at([], 5), -1)

	def test_untitled_card(self):
		clips = layout.layout(_timeline(Card("")), [10])
		self.assertEqual(layout.chapters(clips), [{'title': "(untitled)", 'frame': 0}])

	def test_clip_ranges(self):
		ranges = layout.clip_ranges(self._clips())
		self.assertEqual(ranges[1], {
			'kind': 'cast',
			'title': "/casts/x.cast",
			'start': 45,
			'visibleStart': 60,
			'end': 135,
		})

#============================================

class BaseFramesTest(unittest.TestCase):
	def test_cards_and_probed_casts(self):
		timeline = _timeline(Card("A", seconds=2), Cast("/casts/a.cast"), Card("B", seconds=0.01))
		durations = {"/casts/a.cast": 3.25}
		frames = layout.clip_base_frames(timeline, 30, durations.get)
		# 3.25 s -> 97.5 frames rounds up, 0.3 frames rounds up to 1
		self.assertEqual(frames, [60, 98, 1])

	def test_cast_without_probe_raises(self):
		with self.assertRaises(RuntimeError):
			layout.clip_base_frames(_timeline(Cast("/casts/a.cast")), 30)

	def test_empty_cast_is_one_frame(self):
		frames = layout.clip_base_frames(_timeline(Cast("/casts/a.cast")), 30, lambda path: 0.0)
		self.assertEqual(frames, [1])

#============================================

if __name__ == '__main__':
	unittest.main()

#!/usr/bin/env python3

"""
Unit tests for the render schedule.
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
from shellscenelib.core import schedule
from shellscenelib.core.model import AudioAttachment, Card, Cast, Timeline, Transition

#============================================

def _timeline() -> Timeline:
	card = Card("Hello", seconds=2, audio=[AudioAttachment("speech/demo/a.opus")])
	cast = Cast("/casts/b.cast", 80, 24, audio=[
		AudioAttachment("speech/demo/b.opus", offset_sec=1),
		AudioAttachment("speech/demo/late.opus", anchor='outEnd', offset_sec=1),
		AudioAttachment("music.ogg", anchor='absolute', offset_sec=2.5, volume=1.5,
			loop=True, fade_in_sec=0.5, fade_out_sec=1),
	])
	return Timeline("demo", [card, Transition('fade', 10), cast])

#============================================

class ScheduleTest(unittest.TestCase):
	def setUp(self):
		self.plan = schedule.build_schedule(_timeline(), [60, 90], 30)

	def test_totals(self):
		self.assertEqual(self.plan['name'], "demo")
		self.assertEqual(self.plan['fps'], 30)
		self.assertEqual(self.plan['durationInFrames'], 150)
		self.assertEqual(self.plan['chapters'], [{'title': "Hello", 'frame': 0}])

	def test_clip_entries(self):
		clips = self.plan['clips']
		self.assertEqual([clip['start'] for clip in clips], [0, 60])
		self.assertEqual([clip['sourceIndex'] for clip in clips], [0, 2])
		self.assertIsNone(clips[0]['inTransition'])
		self.assertEqual(clips[0]['outTransition'],
			{'type': "transition", 'name': "fade", 'durationFrames': 10})
		self.assertEqual(clips[1]['inDurationFrames'], 10)
		self.assertIsNone(clips[1]['outTransition'])

	def test_card_audio_defaults_to_in_end(self):
		audio = self.plan['clips'][0]['audio']
		self.assertEqual(audio, [{
			'src': "speech/demo/a.opus",
			'anchor': 'inEnd',
			'startFrame': 0,
			'relFrom': 0,
			'relDur': 60,
			'volume': 1.0,
			'fadeInFrames': 0,
			'fadeOutFrames': 0,
			'loop': False,
		}])

	def test_cast_audio_defaults_to_in_begin(self):
		entry = self.plan['clips'][1]['audio'][0]
		self.assertEqual(entry['anchor'], 'inBegin')
		self.assertEqual(entry['startFrame'], 90)
		self.assertEqual(entry['relFrom'], 30)
		self.assertEqual(entry['relDur'], 60)

	def test_audio_past_clip_end_is_dropped(self):
		sources = [entry['src'] for entry in self.plan['clips'][1]['audio']]
		self.assertNotIn("speech/demo/late.opus", sources)
		self.assertEqual(len(sources), 2)

	def test_absolute_audio_clamps_and_fades(self):
		entry = self.plan['clips'][1]['audio'][1]
		# 2.5 s from the composition origin is 15 frames into the cast
		self.assertEqual(entry['startFrame'], 75)
		self.assertEqual(entry['relFrom'], 15)
		self.assertEqual(entry['volume'], 1.0)
		self.assertEqual(entry['fadeInFrames'], 15)
		self.assertEqual(entry['fadeOutFrames'], 30)
		self.assertTrue(entry['loop'])

	def test_audio_before_clip_start_plays_from_clip_start(self):
		clip = layout.layout(Timeline("x", [Card("A"), Card("B")]), [30, 30])[1]
		attachment = AudioAttachment("early.opus", anchor='absolute', offset_sec=0)
		entry = schedule.resolve_audio(clip, attachment, 30)
		self.assertEqual(entry['startFrame'], 0)
		self.assertEqual(entry['relFrom'], 0)
		self.assertEqual(entry['relDur'], 30)

	def test_fractional_fps_reported_as_float(self):
		plan = schedule.build_schedule(Timeline("x", [Card("A", seconds=1)]), [30], "30000/1001")
		self.assertAlmostEqual(plan['fps'], 29.97002997)

#============================================

if __name__ == '__main__':
	unittest.main()

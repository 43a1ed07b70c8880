#!/usr/bin/env python3

from shellscenelib.core import anchors
from shellscenelib.core import config
from shellscenelib.core import layout
from shellscenelib.core import utils

#============================================

def _transition_summary(transition):
	if transition is None:
		return None
	return transition.to_dict()

#============================================

def resolve_audio(clip, attachment, fps):
	"""
	Place one audio attachment inside its clip's sequence.

	Args:
		clip: ClipNode owning the attachment.
		attachment: AudioAttachment to place.
		fps: Frames per second.

	Returns:
		dict: Playback entry, or None when it starts past the clip's end.
	"""
	anchor = attachment.anchor
	if anchor is None:
		anchor = clip.item.default_audio_anchor()
	start_frame = anchors.cue_frame(clip, anchor, attachment.offset_sec, fps)
	rel_from = max(0, start_frame - clip.start)
	if rel_from >= clip.duration:
		return None
	volume = attachment.volume
	if volume is None:
		volume = config.DEFAULTS['volume']
	volume = max(0.0, min(1.0, float(volume)))
	fade_in_sec = attachment.fade_in_sec
	if fade_in_sec is None:
		fade_in_sec = config.DEFAULTS['fade_in_sec']
	fade_out_sec = attachment.fade_out_sec
	if fade_out_sec is None:
		fade_out_sec = config.DEFAULTS['fade_out_sec']
	loop = attachment.loop
	if loop is None:
		loop = config.DEFAULTS['loop']
	return {
		'src': attachment.src,
		'anchor': anchor,
		'startFrame': start_frame,
		'relFrom': rel_from,
		'relDur': clip.duration - rel_from,
		'volume': volume,
		'fadeInFrames': max(0, utils.frames_from_seconds(fade_in_sec, fps)),
		'fadeOutFrames': max(0, utils.frames_from_seconds(fade_out_sec, fps)),
		'loop': bool(loop),
	}

#============================================

def build_schedule(timeline, base_frames: list, fps) -> dict:
	"""
	Build the frame schedule that drives the rendering host.
	"""
	fps = utils.parse_fps(fps)
	clips = layout.layout(timeline, base_frames)
	clip_entries = []
	for index, clip in enumerate(clips):
		audio_entries = []
		for attachment in clip.item.audio:
			entry = resolve_audio(clip, attachment, fps)
			if entry is not None:
				audio_entries.append(entry)
		clip_entries.append({
			'index': index,
			'sourceIndex': clip.source_index,
			'kind': clip.kind,
			'title': clip.item.display_title(),
			'start': clip.start,
			'duration': clip.duration,
			'baseFrames': clip.base_frames,
			'inDurationFrames': clip.in_duration_frames,
			'outDurationFrames': clip.out_duration_frames,
			'inTransition': _transition_summary(clip.in_transition),
			'outTransition': _transition_summary(clip.out_transition),
			'audio': audio_entries,
		})
	fps_value = float(fps)
	if fps.denominator == 1:
		fps_value = fps.numerator
	return {
		'name': timeline.name,
		'fps': fps_value,
		'durationInFrames': layout.schedule_frames(clips),
		'clips': clip_entries,
		'chapters': layout.chapters(clips),
		'ranges': layout.clip_ranges(clips),
	}

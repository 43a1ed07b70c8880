#!/usr/bin/env python3

"""
Pytest coverage for timeline document validation.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from shellscenelib.core.errors import SemanticError
from shellscenelib.core.model import AudioAttachment, Cast, Timeline, item_from_dict

#============================================

def test_compiled_document_loads() -> None:
	document = {
		'name': "demo",
		'items': [
			{'type': "card", 'title': "A", 'seconds': 2,
				'audio': {'src': "speech/demo/a.opus", 'anchor': "inEnd", 'offsetSec': 0.5}},
			{'type': "transition", 'name': "swipe", 'durationFrames': 15, 'direction': "left"},
			{'type': "cast", 'path': "/casts/x.cast", 'cols': 80, 'rows': 24},
		],
	}
	timeline = Timeline.from_dict(document)
	card = timeline.items[0]
	assert len(card.audio) == 1
	assert card.audio[0].anchor == "inEnd"
	assert isinstance(timeline.items[2], Cast)
	assert timeline.items[2].to_dict()['castPath'] == "/casts/x.cast"
	assert [position for (position, _item) in timeline.clips()] == [0, 2]

#============================================

@pytest.mark.parametrize(
	"document",
	[
		[],
		{'items': []},
		{'name': "", 'items': []},
		{'name': "x"},
		{'name': "x", 'items': [{'type': "video"}]},
		{'name': "x", 'items': [{'type': "transition", 'name': "spin", 'durationFrames': 5}]},
		{'name': "x", 'items': [{'type': "transition", 'name': "fade", 'durationFrames': -1}]},
		{'name': "x", 'items': [{'type': "card", 'title': 5}]},
		{'name': "x", 'items': [{'type': "cast", 'castPath': "/a.cast", 'cols': 0}]},
		{'name': "x", 'items': [{'type': "card", 'title': "A", 'speech': [{'text': "hi", 'anchor': "mid"}]}]},
	],
)
def test_invalid_documents(document) -> None:
	with pytest.raises(SemanticError):
		Timeline.from_dict(document)

#============================================

def test_attachment_volume_range() -> None:
	with pytest.raises(SemanticError):
		AudioAttachment.from_dict({'src': "a.ogg", 'volume': 1.5})
	with pytest.raises(SemanticError):
		AudioAttachment.from_dict({'src': "a.ogg", 'loop': "yes"})
	attachment = AudioAttachment.from_dict({'src': "a.ogg", 'volume': 0.25, 'loop': True})
	assert attachment.to_dict() == {'src': "a.ogg", 'offsetSec': 0.0, 'volume': 0.25, 'loop': True}

#============================================

def test_unknown_item_type_message() -> None:
	with pytest.raises(SemanticError) as excinfo:
		item_from_dict({'type': "video"}, "items[3]")
	assert "items[3]" in str(excinfo.value)

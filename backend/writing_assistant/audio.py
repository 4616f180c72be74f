"""
PCM framing for the live voice session.

Microphone audio goes up as 16 kHz mono little-endian int16 PCM, and the model
answers with 24 kHz int16 PCM chunks. The helpers here convert between float
samples and PCM bytes, and keep the bookkeeping needed to play answer chunks
back-to-back and to cut them off when the user interrupts.
"""

from __future__ import annotations

import base64
import sys
import uuid
from array import array
from typing import Dict, Iterable, List, Optional, Tuple

from .assistant import ChatMessage

INPUT_SAMPLE_RATE = 16000
OUTPUT_SAMPLE_RATE = 24000
INPUT_MIME_TYPE = f"audio/pcm;rate={INPUT_SAMPLE_RATE}"

_INT16_MIN = -32768
_INT16_MAX = 32767


def float_to_pcm16(samples: Iterable[float]) -> bytes:
	"""Scale [-1.0, 1.0] floats by 32768 and pack as little-endian int16."""
	pcm = array("h", (max(_INT16_MIN, min(_INT16_MAX, int(s * 32768))) for s in samples))
	if sys.byteorder == "big":
		pcm.byteswap()
	return pcm.tobytes()


def create_blob(samples: Iterable[float]) -> Dict[str, str]:
	return {
		"data": base64.b64encode(float_to_pcm16(samples)).decode("ascii"),
		"mimeType": INPUT_MIME_TYPE,
	}


def decode_base64(data: str) -> bytes:
	return base64.b64decode(data)


def decode_audio_data(data: bytes, num_channels: int = 1) -> List[List[float]]:
	"""Deinterleave int16 PCM into per-channel float samples in [-1.0, 1.0)."""
	if num_channels < 1:
		raise ValueError("num_channels must be >= 1")
	if len(data) % 2:
		# A dangling byte cannot form a sample
		data = data[:-1]
	pcm = array("h")
	pcm.frombytes(data)
	if sys.byteorder == "big":
		pcm.byteswap()
	frame_count = len(pcm) // num_channels
	return [
		[pcm[i * num_channels + channel] / 32768.0 for i in range(frame_count)]
		for channel in range(num_channels)
	]


def pcm_duration(data: bytes, sample_rate: int = OUTPUT_SAMPLE_RATE, num_channels: int = 1) -> float:
	frames = len(data) // (2 * num_channels)
	return frames / float(sample_rate)


class PlaybackScheduler:
	"""Queue answer chunks so each starts when the previous one ends.

	Times are in seconds on the client's audio clock. ``interrupt`` drops every
	pending source and resets the cursor, mirroring barge-in behaviour.
	"""

	def __init__(self, sample_rate: int = OUTPUT_SAMPLE_RATE, num_channels: int = 1) -> None:
		self.sample_rate = sample_rate
		self.num_channels = num_channels
		self.next_start_time: float = 0.0
		self.sources: Dict[str, Tuple[float, float]] = {}

	def schedule(self, chunk: bytes, now: float = 0.0, source_id: Optional[str] = None) -> Tuple[str, float, float]:
		duration = pcm_duration(chunk, self.sample_rate, self.num_channels)
		self.next_start_time = max(self.next_start_time, now)
		start = self.next_start_time
		self.next_start_time += duration
		sid = source_id or uuid.uuid4().hex
		self.sources[sid] = (start, duration)
		return sid, start, duration

	def finish(self, source_id: str) -> None:
		self.sources.pop(source_id, None)

	def interrupt(self) -> List[str]:
		stopped = list(self.sources)
		self.sources.clear()
		self.next_start_time = 0.0
		return stopped


class TurnTranscript:
	def __init__(self) -> None:
		self.input_text = ""
		self.output_text = ""

	def add_input(self, delta: str) -> str:
		self.input_text += delta or ""
		return self.input_text

	def add_output(self, delta: str) -> str:
		self.output_text += delta or ""
		return self.output_text

	def turn_complete(self) -> List[ChatMessage]:
		messages: List[ChatMessage] = []
		if self.input_text:
			messages.append(ChatMessage(sender="user", text=self.input_text))
		if self.output_text:
			messages.append(ChatMessage(sender="ai", text=self.output_text))
		self.input_text = ""
		self.output_text = ""
		return messages

from __future__ import annotations
import base64
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import websockets

from .audio import INPUT_MIME_TYPE
from .settings import settings

logger = logging.getLogger(__name__)


class LiveSessionError(RuntimeError):
	pass


class GeminiLiveSession:
	"""Bidirectional Gemini Live session over a websocket.

	Usage:
		async with GeminiLiveSession(system_instruction=...) as session:
			await session.send_audio(pcm_bytes)
			async for message in session.messages():
				...
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		model: Optional[str] = None,
		url: Optional[str] = None,
		system_instruction: Optional[str] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_live_model
		self.url = url or settings.gemini_live_url
		self.system_instruction = system_instruction
		self._ws: Any = None

	def setup_message(self) -> Dict[str, Any]:
		setup: Dict[str, Any] = {
			"model": self.model if self.model.startswith("models/") else f"models/{self.model}",
			"generationConfig": {"responseModalities": ["AUDIO"]},
			"inputAudioTranscription": {},
			"outputAudioTranscription": {},
		}
		if self.system_instruction:
			setup["systemInstruction"] = {"parts": [{"text": self.system_instruction}]}
		return {"setup": setup}

	async def connect(self) -> None:
		self._ws = await websockets.connect(f"{self.url}?key={self.api_key}", max_size=None)
		await self._ws.send(json.dumps(self.setup_message()))
		first = _decode(await self._ws.recv())
		if "setupComplete" not in first:
			await self.close()
			raise LiveSessionError(f"Live session setup failed: {first}")
		logger.info("Live session opened with %s", self.model)

	async def send_audio(self, pcm: bytes) -> None:
		if self._ws is None:
			raise LiveSessionError("Live session is not connected")
		await self._ws.send(json.dumps({
			"realtimeInput": {
				"audio": {"data": base64.b64encode(pcm).decode("ascii"), "mimeType": INPUT_MIME_TYPE},
			}
		}))

	async def messages(self) -> AsyncIterator[Dict[str, Any]]:
		if self._ws is None:
			raise LiveSessionError("Live session is not connected")
		async for raw in self._ws:
			yield _decode(raw)

	async def close(self) -> None:
		if self._ws is not None:
			await self._ws.close()
			self._ws = None

	async def __aenter__(self) -> "GeminiLiveSession":
		await self.connect()
		return self

	async def __aexit__(self, *exc: Any) -> None:
		await self.close()


def _decode(raw: Any) -> Dict[str, Any]:
	# The service sends JSON in binary frames as often as in text frames
	if isinstance(raw, (bytes, bytearray)):
		raw = raw.decode("utf-8")
	try:
		data = json.loads(raw)
	except json.JSONDecodeError as e:
		raise LiveSessionError(f"Undecodable live message: {raw[:200]!r}") from e
	return data if isinstance(data, dict) else {}

"""
Live Voice Conversation
=======================

WebSocket bridge between the browser and a Gemini Live session. The browser
streams microphone audio (16 kHz int16 PCM) and plays back the model's 24 kHz
answer chunks; this module relays audio both ways, accumulates the turn
transcripts, and tells the client when to start each answer chunk so they play
back-to-back.

Client -> server frames:
- binary: raw PCM16 mono 16 kHz
- {"type": "audio", "data": <base64 PCM16>}
- {"type": "clock", "now": <seconds on the client's audio clock>}
- {"type": "ended", "id": <source id>}   playback of a chunk finished
- {"type": "stop"}

Server -> client frames:
- {"type": "ready"}
- {"type": "audio", "id", "data", "start", "duration"}
- {"type": "input_transcription" | "output_transcription", "text"}
- {"type": "turn_complete", "messages"}
- {"type": "interrupted", "stopped"}
- {"type": "error", "detail"}
"""

from __future__ import annotations

import asyncio
import binascii
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from ..academic_data import full_text_context
from ..assistant import ChatMessage
from ..audio import PlaybackScheduler, TurnTranscript, decode_base64
from ..db import get_db
from ..live_client import GeminiLiveSession
from .auth import consume_request, user_from_token
from .chat import save_messages

router = APIRouter(prefix="/voice", tags=["voice"])

logger = logging.getLogger(__name__)

# Custom close codes (4000-4999 are application-defined)
CLOSE_UNAUTHORIZED = 4401
CLOSE_LIMIT_REACHED = 4429
CLOSE_UPSTREAM_ERROR = 4502


class VoiceState:
	def __init__(self) -> None:
		self.scheduler = PlaybackScheduler()
		self.transcript = TurnTranscript()
		self.client_clock: float = 0.0


def open_live_session() -> GeminiLiveSession:
	return GeminiLiveSession(system_instruction=full_text_context())


def handle_server_message(message: Dict[str, Any], state: VoiceState) -> tuple[List[Dict[str, Any]], List[ChatMessage]]:
	"""Translate one upstream message into client events.

	Returns the events to send and the chat messages finished by this message
	(non-empty only on turn completion).
	"""
	events: List[Dict[str, Any]] = []
	finished: List[ChatMessage] = []
	content = message.get("serverContent") or {}
	parts = (content.get("modelTurn") or {}).get("parts") or []
	for part in parts:
		inline = part.get("inlineData") if isinstance(part, dict) else None
		if not inline or not inline.get("data"):
			continue
		chunk = decode_base64(inline["data"])
		sid, start, duration = state.scheduler.schedule(chunk, state.client_clock)
		events.append({"type": "audio", "id": sid, "data": inline["data"], "start": start, "duration": duration})
	if content.get("inputTranscription"):
		text = state.transcript.add_input(content["inputTranscription"].get("text", ""))
		events.append({"type": "input_transcription", "text": text})
	if content.get("outputTranscription"):
		text = state.transcript.add_output(content["outputTranscription"].get("text", ""))
		events.append({"type": "output_transcription", "text": text})
	if content.get("turnComplete"):
		finished = state.transcript.turn_complete()
		events.append({"type": "turn_complete", "messages": [m.model_dump() for m in finished]})
	if content.get("interrupted"):
		stopped = state.scheduler.interrupt()
		events.append({"type": "interrupted", "stopped": stopped})
	return events, finished


def handle_client_frame(frame: Dict[str, Any], state: VoiceState) -> tuple[Optional[bytes], bool]:
	"""Apply one client frame; returns (audio to forward, stop requested)."""
	if "bytes" in frame and frame["bytes"] is not None:
		return frame["bytes"], False
	text = frame.get("text")
	if not text:
		return None, False
	try:
		data = json.loads(text)
	except json.JSONDecodeError:
		logger.debug("Ignoring non-JSON voice frame")
		return None, False
	if not isinstance(data, dict):
		logger.debug("Ignoring voice frame that is not a JSON object")
		return None, False
	kind = data.get("type")
	if kind == "audio" and data.get("data"):
		try:
			return decode_base64(data["data"]), False
		except (binascii.Error, ValueError):
			logger.debug("Dropping voice audio frame with bad base64")
			return None, False
	if kind == "clock":
		try:
			state.client_clock = float(data.get("now", 0.0))
		except (TypeError, ValueError):
			pass
		return None, False
	if kind == "ended" and data.get("id"):
		state.scheduler.finish(str(data["id"]))
		return None, False
	if kind == "stop":
		return None, True
	return None, False


@router.websocket("/live")
async def live(websocket: WebSocket, token: str = "", db: Session = Depends(get_db)):
	await websocket.accept()
	try:
		user = user_from_token(token, db)
	except HTTPException:
		await websocket.close(code=CLOSE_UNAUTHORIZED)
		return
	try:
		consume_request(db, user.username)
	except HTTPException as e:
		await websocket.send_json({"type": "error", "detail": e.detail})
		await websocket.close(code=CLOSE_LIMIT_REACHED)
		return
	try:
		session = open_live_session()
		await session.connect()
	except Exception as e:
		logger.exception("Failed to start voice session")
		await websocket.send_json({"type": "error", "detail": f"Could not start voice session: {e}"})
		await websocket.close(code=CLOSE_UPSTREAM_ERROR)
		return

	state = VoiceState()
	await websocket.send_json({"type": "ready"})

	async def client_to_upstream() -> None:
		while True:
			frame = await websocket.receive()
			if frame.get("type") == "websocket.disconnect":
				return
			audio, stop = handle_client_frame(frame, state)
			if stop:
				return
			if audio:
				await session.send_audio(audio)

	async def upstream_to_client() -> None:
		async for message in session.messages():
			events, finished = handle_server_message(message, state)
			if finished:
				save_messages(db, user.username, finished, "voice")
			for event in events:
				await websocket.send_json(event)

	tasks = [asyncio.create_task(client_to_upstream()), asyncio.create_task(upstream_to_client())]
	try:
		done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
		for task in pending:
			task.cancel()
		await asyncio.gather(*pending, return_exceptions=True)
		for task in done:
			err = task.exception()
			if err is not None and not isinstance(err, WebSocketDisconnect):
				logger.error("Live session error: %s", err)
				try:
					await websocket.send_json({"type": "error", "detail": str(err)})
				except (RuntimeError, WebSocketDisconnect):
					pass
	finally:
		await session.close()
		try:
			await websocket.close()
		except RuntimeError:
			# Already closed by the client
			pass

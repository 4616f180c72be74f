from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..assistant import (
	REFERENCE_REQUEST_PREFIX,
	SEARCH_REQUEST_PREFIX,
	ChatMessage,
	check_references_online,
	get_ai_response,
	get_ai_response_with_search,
	render_markdown,
	reply_text,
)
from ..db import get_db
from ..gemini_client import GeminiClient, get_gemini_client
from ..models import ChatMessageRow
from .auth import User, consume_request, get_current_user

router = APIRouter(prefix="/chat", tags=["chat"])


class ChatRequest(BaseModel):
	message: str


class ChatResponse(BaseModel):
	request: ChatMessage
	reply: ChatMessage
	html: str


def save_messages(db: Session, username: str, messages: List[ChatMessage], mode: str) -> None:
	for msg in messages:
		db.add(ChatMessageRow(username=username, sender=msg.sender, mode=mode, text=msg.text))
	db.commit()


def _require_message(req: ChatRequest) -> str:
	message = req.message or ""
	if not message.strip():
		raise HTTPException(status_code=400, detail="message is required")
	return message


def _respond(db: Session, user: User, mode: str, request_text: str, answer: str) -> ChatResponse:
	request_msg = ChatMessage(sender="user", text=request_text)
	reply = ChatMessage(sender="ai", text=answer)
	save_messages(db, user.username, [request_msg, reply], mode)
	return ChatResponse(request=request_msg, reply=reply, html=render_markdown(answer))


@router.post("/message", response_model=ChatResponse)
async def message(
	req: ChatRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	client: GeminiClient = Depends(get_gemini_client),
):
	text = _require_message(req)
	consume_request(db, user.username)
	answer = await get_ai_response(client, text)
	return _respond(db, user, "chat", text, answer)


@router.post("/search", response_model=ChatResponse)
async def search(
	req: ChatRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	client: GeminiClient = Depends(get_gemini_client),
):
	text = _require_message(req)
	consume_request(db, user.username)
	result = await get_ai_response_with_search(client, text)
	return _respond(db, user, "search", SEARCH_REQUEST_PREFIX + text, reply_text(result))


@router.post("/references", response_model=ChatResponse)
async def references(
	req: ChatRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	client: GeminiClient = Depends(get_gemini_client),
):
	text = _require_message(req)
	consume_request(db, user.username)
	result = await check_references_online(client, text)
	return _respond(db, user, "references", REFERENCE_REQUEST_PREFIX + text, reply_text(result))


@router.get("/history", response_model=List[ChatMessage])
def history(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	rows = (
		db.query(ChatMessageRow)
		.filter(ChatMessageRow.username == user.username)
		.order_by(ChatMessageRow.id.asc())
		.all()
	)
	return [ChatMessage(sender=r.sender, text=r.text) for r in rows]


@router.delete("/history", status_code=204)
def clear_history(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	db.query(ChatMessageRow).filter(ChatMessageRow.username == user.username).delete()
	db.commit()
	return Response(status_code=204)

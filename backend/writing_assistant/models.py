from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class AuthUser(Base):
	__tablename__ = "auth_users"
	# Primary key is username
	username = Column(String(128), primary_key=True, index=True)
	password_hash = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	requests_used = Column(Integer, default=0, nullable=False)
	requests_limit = Column(Integer, default=1000, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class AuthSession(Base):
	__tablename__ = "auth_sessions"
	# jti claim of the issued token
	session_id = Column(String(64), primary_key=True)
	username = Column(String(128), nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	last_activity_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ReviewDraft(Base):
	__tablename__ = "review_drafts"
	# Single saved draft per username
	username = Column(String(128), primary_key=True)
	review_mode = Column(String(16), default="essay", nullable=False)
	essay_text = Column(Text, nullable=False, default="")
	selected_essay_level = Column(String(32), nullable=True)
	selected_essay_type = Column(String(128), nullable=True)
	selected_thesis_level = Column(String(32), nullable=True)
	selected_thesis_chapter = Column(String(128), nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ReviewRecord(Base):
	__tablename__ = "review_records"
	id = Column(Integer, primary_key=True, autoincrement=True)
	username = Column(String(128), nullable=False, index=True)
	review_mode = Column(String(16), nullable=False)
	level = Column(String(32), nullable=False)
	# Essay type or thesis chapter
	target = Column(String(128), nullable=False)
	text_excerpt = Column(Text, nullable=True)
	overall_score = Column(String(64), nullable=True)
	feedback_json = Column(Text, nullable=False)  # JSON string snapshot
	anchors_json = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ChatMessageRow(Base):
	__tablename__ = "chat_messages"
	id = Column(Integer, primary_key=True, autoincrement=True)
	username = Column(String(128), nullable=False, index=True)
	sender = Column(String(8), nullable=False)  # "user" | "ai"
	mode = Column(String(16), nullable=False, default="chat")  # chat | search | references | voice
	text = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

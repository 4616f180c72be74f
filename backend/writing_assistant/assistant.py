from __future__ import annotations

import html
import logging
import re
from typing import Any, Dict, Iterable, List, Literal

from pydantic import BaseModel, Field

from .academic_data import full_text_context
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

CHAT_ERROR_TEXT = "Sorry, I encountered an error. Please try again."
SEARCH_ERROR_TEXT = "Sorry, I encountered an error while searching for information online. Please try again."
REFERENCES_ERROR_TEXT = "Sorry, I encountered an error while checking the references. Please try again."

SEARCH_REQUEST_PREFIX = "**Online Search Request:**\n"
REFERENCE_REQUEST_PREFIX = "**Reference Check Request:**\n"


class ChatMessage(BaseModel):
	sender: Literal["user", "ai"]
	text: str


class AssistantReply(BaseModel):
	text: str
	sources: List[Dict[str, Any]] = Field(default_factory=list)


def _search_prompt(query: str) -> str:
	return (
		"You are a helpful research assistant. Provide a comprehensive answer to the following user query using "
		"your search tool. Synthesize the information from the web and present it clearly. Always cite your "
		f'sources. User Query: "{query}"'
	)


def _reference_check_prompt(references: str) -> str:
	return (
		"You are an academic reference checker. Please verify the following academic references. For each one, "
		"confirm its existence and provide a direct link if you can find one using your search tool. Point out any "
		"apparent formatting errors or inconsistencies. If a reference cannot be found, state that clearly.\n\n"
		f"**References to check:**\n{references}"
	)


async def get_ai_response(client: GeminiClient, message: str) -> str:
	try:
		return await client.generate(
			message,
			system_instruction=full_text_context(),
			temperature=0.5,
			top_p=0.95,
			top_k=64,
		)
	except Exception:
		logger.exception("Error fetching AI response")
		return CHAT_ERROR_TEXT


async def get_ai_response_with_search(client: GeminiClient, message: str) -> AssistantReply:
	try:
		result = await client.generate_grounded(_search_prompt(message), temperature=0.7)
	except Exception:
		logger.exception("Error fetching AI response with search")
		return AssistantReply(text=SEARCH_ERROR_TEXT)
	return AssistantReply(text=result.text, sources=result.sources)


async def check_references_online(client: GeminiClient, references: str) -> AssistantReply:
	try:
		result = await client.generate_grounded(_reference_check_prompt(references), temperature=0.2)
	except Exception:
		logger.exception("Error checking references")
		return AssistantReply(text=REFERENCES_ERROR_TEXT)
	return AssistantReply(text=result.text, sources=result.sources)


def format_sources(sources: Iterable[Dict[str, Any]]) -> str:
	"""Render web grounding chunks as a markdown list, one entry per unique uri."""
	unique: Dict[str, str] = {}
	for chunk in sources or []:
		web = chunk.get("web") if isinstance(chunk, dict) else None
		if not isinstance(web, dict):
			continue
		uri, title = web.get("uri"), web.get("title")
		if uri and title:
			unique[uri] = title
	if not unique:
		return ""
	lines = ["", "", "**Sources Found:**"]
	lines += [f"- [{title}]({uri})" for uri, title in unique.items()]
	return "\n".join(lines) + "\n"


def reply_text(reply: AssistantReply) -> str:
	return reply.text + format_sources(reply.sources)


_BOLD = re.compile(r"\*\*(.*?)\*\*")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")


def render_markdown(text: str) -> str:
	"""Tiny markdown subset used by chat bubbles: bold, dash lists, links."""
	if not text:
		return ""
	rendered: List[str] = []
	for line in html.escape(text, quote=True).split("\n"):
		line = _BOLD.sub(r"<strong>\1</strong>", line)
		line = _LINK.sub(r'<a href="\2" target="_blank" rel="noopener noreferrer">\1</a>', line)
		if line.startswith("- "):
			line = f'<li class="ml-4 list-disc">{line[2:]}</li>'
		rendered.append(line)
	return "<br />".join(rendered)

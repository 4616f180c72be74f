from __future__ import annotations
import logging
import httpx
from typing import Any, AsyncIterator, Dict, List, Optional
from fastapi import HTTPException
from pydantic import BaseModel, Field
from .settings import settings

logger = logging.getLogger(__name__)


class GroundedResult(BaseModel):
	text: str
	# Raw groundingChunks, e.g. {"web": {"uri": ..., "title": ...}}
	sources: List[Dict[str, Any]] = Field(default_factory=list)


def extract_text(data: Dict[str, Any]) -> str:
	"""Join the text parts of the first candidate.

	Raises RuntimeError when the response carries no candidate text (blocked
	prompt, empty candidate list, ...).
	"""
	try:
		parts = data["candidates"][0]["content"]["parts"]
	except (KeyError, IndexError, TypeError):
		raise RuntimeError(f"Unexpected Gemini response: {data}")
	texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
	if not texts:
		raise RuntimeError(f"Gemini response has no text parts: {data}")
	return "".join(texts)


def extract_grounding_chunks(data: Dict[str, Any]) -> List[Dict[str, Any]]:
	try:
		chunks = data["candidates"][0].get("groundingMetadata", {}).get("groundingChunks") or []
	except (KeyError, IndexError, AttributeError, TypeError):
		return []
	return [c for c in chunks if isinstance(c, dict)]


class GeminiClient:
	def __init__(self, api_key: Optional[str] = None, *, base_url: Optional[str] = None, model: Optional[str] = None) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		self._base_url_override = base_url
		# Vertex takes the key via header, AI Studio via query string
		self._auth_in_query = self.provider != "vertex"
		self._client = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=settings.gemini_timeout_seconds)

	def url_for(self, model: Optional[str] = None) -> str:
		if self._base_url_override:
			return self._base_url_override
		model = model or self.model
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			return (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{model}:generateContent"
			)
		return f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

	async def generate(
		self,
		prompt: str,
		*,
		model: Optional[str] = None,
		system_instruction: Optional[str] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
		top_k: Optional[int] = None,
		response_mime_type: Optional[str] = None,
		response_schema: Optional[Dict[str, Any]] = None,
		tools: Optional[List[Dict[str, Any]]] = None,
		thinking_budget: Optional[int] = None,
	) -> str:
		data = await self.generate_raw(
			prompt,
			model=model,
			system_instruction=system_instruction,
			temperature=temperature,
			top_p=top_p,
			top_k=top_k,
			response_mime_type=response_mime_type,
			response_schema=response_schema,
			tools=tools,
			thinking_budget=thinking_budget,
		)
		return extract_text(data)

	async def generate_grounded(
		self,
		prompt: str,
		*,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
	) -> GroundedResult:
		"""Run a prompt with the Google Search tool and keep the grounding chunks."""
		data = await self.generate_raw(
			prompt,
			model=model,
			temperature=temperature,
			tools=[{"google_search": {}}],
		)
		return GroundedResult(text=extract_text(data), sources=extract_grounding_chunks(data))

	async def generate_raw(
		self,
		prompt: str,
		*,
		model: Optional[str] = None,
		system_instruction: Optional[str] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
		top_k: Optional[int] = None,
		response_mime_type: Optional[str] = None,
		response_schema: Optional[Dict[str, Any]] = None,
		tools: Optional[List[Dict[str, Any]]] = None,
		thinking_budget: Optional[int] = None,
	) -> Dict[str, Any]:
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		if system_instruction:
			payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
		generation_config: Dict[str, Any] = {}
		if temperature is not None:
			generation_config["temperature"] = temperature
		if top_p is not None:
			generation_config["topP"] = top_p
		if top_k is not None:
			generation_config["topK"] = top_k
		if response_mime_type:
			generation_config["responseMimeType"] = response_mime_type
		if response_schema:
			generation_config["responseSchema"] = response_schema
		if generation_config:
			payload["generationConfig"] = generation_config
		if tools:
			payload["tools"] = tools
		# Structured and tool-grounded calls cannot be honoured by the text fallback
		plain_text = response_schema is None and not tools
		return await self._post_payload(
			payload,
			model=model,
			thinking_budget=thinking_budget,
			fallback_prompt=prompt if plain_text else None,
			fallback_system=system_instruction,
			allow_fallback=plain_text,
		)

	async def generate_multimodal(
		self,
		parts: List[Dict[str, Any]],
		*,
		model: Optional[str] = None,
		role: str = "user",
		thinking_budget: Optional[int] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": role, "parts": parts}]}
		data = await self._post_payload(
			payload,
			model=model,
			thinking_budget=thinking_budget,
			fallback_prompt=None,
			allow_fallback=False,
		)
		return extract_text(data)

	async def _post_payload(
		self,
		payload: Dict[str, Any],
		*,
		model: Optional[str] = None,
		thinking_budget: Optional[int] = None,
		fallback_prompt: Optional[str],
		fallback_system: Optional[str] = None,
		allow_fallback: bool = True,
	) -> Dict[str, Any]:
		url = self.url_for(model)
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		if thinking_budget is not None:
			try:
				budget_tokens = int(thinking_budget)
			except (TypeError, ValueError):
				budget_tokens = 0
			generation_config = {**payload.get("generationConfig", {}), "thinkingConfig": {"thinkingBudget": budget_tokens}}
			payload = {**payload, "generationConfig": generation_config}
		last_error: Optional[Exception] = None
		r: Optional[httpx.Response] = None
		try:
			r = await self._client.post(url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			if thinking_budget is not None:
				# Some models reject thinkingConfig; retry once without it
				generation_config = dict(payload.get("generationConfig", {}))
				generation_config.pop("thinkingConfig", None)
				retry_payload = {**payload, "generationConfig": generation_config}
				if not generation_config:
					retry_payload.pop("generationConfig")
				try:
					r = await self._client.post(url, params=params, headers=headers, json=retry_payload)
					r.raise_for_status()
				except httpx.HTTPError as err:
					last_error = err
			else:
				last_error = http_err
		except httpx.RequestError as net_err:
			last_error = net_err
		if last_error is None and r is not None:
			try:
				return r.json()
			except ValueError:
				last_error = RuntimeError(f"Unexpected Gemini response: {r.text}")
		logger.error("Gemini call to %s failed: %s", url.split("?")[0], last_error)
		if not allow_fallback or not self._fallback_enabled:
			raise last_error or RuntimeError("Gemini call failed and no fallback configured")
		if fallback_prompt is None:
			raise last_error or RuntimeError("Gemini call failed and fallback prompt unavailable")
		text = await self._fallback_generate(fallback_prompt, last_error, system_instruction=fallback_system)
		# Same shape as a Gemini reply so callers need not care which backend answered
		return {"candidates": [{"content": {"parts": [{"text": text}]}}]}

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_generate(
		self,
		prompt: str,
		primary_error: Optional[Exception],
		*,
		system_instruction: Optional[str] = None,
	) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error or RuntimeError("Fallback requested but OpenRouter is not configured")
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		messages: List[Dict[str, str]] = []
		if system_instruction:
			messages.append({"role": "system", "content": system_instruction})
		messages.append({"role": "user", "content": prompt})
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": messages,
		}
		try:
			r = await self._fallback_client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			if primary_error is not None:
				raise RuntimeError(
					f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
				) from fallback_err
			raise fallback_err


async def get_gemini_client() -> AsyncIterator[GeminiClient]:
	"""FastAPI dependency yielding a client that is closed after the request."""
	try:
		client = GeminiClient()
	except ValueError as e:
		raise HTTPException(status_code=503, detail=str(e))
	try:
		yield client
	finally:
		await client.aclose()

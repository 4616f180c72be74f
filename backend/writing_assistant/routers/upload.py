from __future__ import annotations
import base64
import logging
from io import BytesIO

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel
from PIL import Image, UnidentifiedImageError
from sqlalchemy.orm import Session

from ..db import get_db
from ..gemini_client import GeminiClient
from ..settings import settings
from .auth import User, consume_request, get_current_user

try:
	import pytesseract  # type: ignore
except ImportError:
	# Local OCR is optional; Gemini does the extraction by default
	pytesseract = None  # type: ignore


router = APIRouter(prefix="/upload", tags=["upload"])

logger = logging.getLogger(__name__)

IMAGE_PROMPT = (
	"Extract all text from this image. Ensure the output is clean text, preserving paragraph structure where "
	"possible. If there is no text, return an empty string."
)
PDF_DETAIL = "PDF processing is in development. For now, please copy and paste the text from your PDF directly into the text box."
MEDIA_DETAIL = "Audio and video transcription is a planned feature. For now, please provide a text transcript."

# Longest image side sent to the model
MAX_IMAGE_SIDE = 2048


class ExtractResponse(BaseModel):
	file_name: str
	text: str


def _prepare_image(content: bytes, mime_type: str) -> tuple[bytes, str]:
	"""Validate the upload is an image and downscale very large ones."""
	try:
		img = Image.open(BytesIO(content))
		img.load()
	except (UnidentifiedImageError, OSError) as e:
		raise HTTPException(status_code=400, detail="Failed to read the image file.") from e
	if max(img.size) <= MAX_IMAGE_SIDE:
		return content, mime_type
	img.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE))
	if img.mode not in ("RGB", "L"):
		img = img.convert("RGB")
	out = BytesIO()
	img.save(out, format="PNG")
	return out.getvalue(), "image/png"


def _local_ocr(content: bytes) -> str:
	img = Image.open(BytesIO(content))
	return pytesseract.image_to_string(img)


async def extract_text_from_image(client: GeminiClient, content: bytes, mime_type: str) -> str:
	parts = [
		{"inlineData": {"mimeType": mime_type, "data": base64.b64encode(content).decode("ascii")}},
		{"text": IMAGE_PROMPT},
	]
	try:
		return await client.generate_multimodal(parts)
	except Exception as e:
		logger.exception("Error extracting text from image")
		if pytesseract is not None:
			try:
				return _local_ocr(content)
			except Exception:
				logger.exception("Local OCR failed as well")
		raise HTTPException(status_code=502, detail="Failed to extract text from the image.") from e


@router.post("/extract", response_model=ExtractResponse)
async def extract(
	file: UploadFile = File(...),
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
):
	mime_type = (file.content_type or "").lower()
	file_name = file.filename or "upload"
	if mime_type == "application/pdf":
		raise HTTPException(status_code=501, detail=PDF_DETAIL)
	if mime_type.startswith("audio/") or mime_type.startswith("video/"):
		raise HTTPException(status_code=501, detail=MEDIA_DETAIL)
	if not (mime_type.startswith("text/") or mime_type.startswith("image/")):
		raise HTTPException(
			status_code=415,
			detail=f"Unsupported file type: {mime_type or 'unknown'}. Please upload text or image files.",
		)
	# One byte past the limit is enough to reject the file
	content = await file.read(settings.max_upload_bytes + 1)
	if len(content) > settings.max_upload_bytes:
		raise HTTPException(status_code=413, detail=f"File is too large; the limit is {settings.max_upload_bytes} bytes")
	if mime_type.startswith("text/"):
		text = content.decode("utf-8-sig", errors="replace")
		return ExtractResponse(file_name=file_name, text=text)
	image_bytes, image_mime = _prepare_image(content, mime_type)
	try:
		client = GeminiClient()
	except ValueError as e:
		raise HTTPException(status_code=503, detail=str(e))
	try:
		consume_request(db, user.username)
	except HTTPException:
		await client.aclose()
		raise
	try:
		text = await extract_text_from_image(client, image_bytes, image_mime)
	finally:
		await client.aclose()
	return ExtractResponse(file_name=file_name, text=text.strip())

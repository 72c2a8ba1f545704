"""
Interface Strings and Translation

Static UI tables plus on-demand machine translation of dynamic text.
"""

from typing import List

from fastapi import APIRouter, Depends

from foodzy.schemas import (
    DetectRequest,
    DetectResponse,
    LanguageInfo,
    TranslateBatchRequest,
    TranslateBatchResponse,
    TranslateRequest,
    TranslateResponse,
    TranslationTable,
)
from foodzy.services.i18n import languages, translation_table
from foodzy.services.translation import BaseTranslationService, get_translation_service

router = APIRouter(tags=["Language"])


@router.get("/api/i18n/languages", response_model=List[LanguageInfo])
async def list_languages() -> List[LanguageInfo]:
    return languages()


@router.get("/api/i18n/{language}", response_model=TranslationTable)
async def ui_strings(language: str) -> TranslationTable:
    """Every UI string for ``language``; unknown entries come back as their keys."""
    return translation_table(language)


@router.post("/api/translate", response_model=TranslateResponse)
async def translate(
    data: TranslateRequest,
    service: BaseTranslationService = Depends(get_translation_service),
) -> TranslateResponse:
    text = await service.translate(data.text, data.target.value, data.source.value)
    return TranslateResponse(text=text, source=data.source.value, target=data.target.value)


@router.post("/api/translate/batch", response_model=TranslateBatchResponse)
async def translate_batch(
    data: TranslateBatchRequest,
    service: BaseTranslationService = Depends(get_translation_service),
) -> TranslateBatchResponse:
    texts = await service.translate_batch(data.texts, data.target.value, data.source.value)
    return TranslateBatchResponse(texts=texts, source=data.source.value, target=data.target.value)


@router.post("/api/translate/detect", response_model=DetectResponse)
async def detect(
    data: DetectRequest,
    service: BaseTranslationService = Depends(get_translation_service),
) -> DetectResponse:
    return DetectResponse(language=await service.detect(data.text))

"""
Labels API Router
Endpoints for label text parsing and openFDA label lookups
"""

from dataclasses import asdict
from fastapi import APIRouter

from api.deps import services
from api.schemas.label import (
    EssentialsResponse,
    LabelParseRequest,
    LabelParseResponse,
    LabelResponse,
    StrengthsResponse,
)
from tools.label_summarizer import essentials
from tools.openfda_client import LabelDetails, openfda_client


router = APIRouter(prefix="/labels", tags=["labels"])


@router.post("/parse", response_model=LabelParseResponse)
async def parse_label(request: LabelParseRequest):
    """
    Extract food rule, interval, suggested frequency and avoid list from label text
    """
    medication_service = services.get_medication_service()
    return LabelParseResponse(**medication_service.suggest_rules(request.text))


@router.get("/{name}", response_model=LabelResponse)
async def get_label(name: str):
    """
    Fetch a label from openFDA, summarize it and parse its rules

    A miss returns found=false with empty sections.
    """
    medication_service = services.get_medication_service()

    details = await openfda_client.fetch_details(name) or LabelDetails(title=name)
    rule = medication_service.suggest_rules(details.combined_text)

    return LabelResponse(
        name=name,
        found=not details.is_empty,
        essentials=EssentialsResponse(**asdict(essentials(details))),
        rule=LabelParseResponse(**rule),
    )


@router.get("/{name}/strengths", response_model=StrengthsResponse)
async def get_strengths(name: str):
    """
    Marketed strengths from the openFDA NDC directory
    """
    strengths = await openfda_client.fetch_dosage_options(name)
    return StrengthsResponse(name=name, strengths=strengths)

"""
openFDA Label Client
Fetches drug label sections used to pre-fill a medication's food rule, interval and avoid list
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from config import get_settings


logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class LabelDetails:
    """Label text grouped by section"""
    title: str
    uses: str = ""
    dosage: str = ""
    interactions: str = ""
    warnings: str = ""
    side_effects: str = ""
    ingredients: List[str] = field(default_factory=list)

    @property
    def combined_text(self) -> str:
        sections = [self.uses, self.dosage, self.interactions, self.warnings, self.side_effects]
        return "\n\n".join(s for s in sections if s)

    @property
    def is_empty(self) -> bool:
        return not self.combined_text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "uses": self.uses,
            "dosage": self.dosage,
            "interactions": self.interactions,
            "warnings": self.warnings,
            "side_effects": self.side_effects,
            "ingredients": self.ingredients,
        }


def _uniq(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def _join(parts: Optional[List[str]]) -> str:
    return "\n\n".join(p.strip() for p in (parts or []) if p and p.strip())


def clean_label_text(raw: str) -> str:
    """Normalise bullets, blank lines and per-line whitespace"""
    s = raw.replace("\r", "\n").replace("•", "\n• ").replace(" · ", " ")
    s = re.sub(r"\n{3,}", "\n\n", s)
    s = "\n".join(line.strip() for line in s.split("\n"))
    return s.strip()


def normalized_display_name(name: str) -> str:
    """Soft title-casing for SHOUTY CAPS words"""
    t = name.strip()
    if not t:
        return name
    words = []
    for w in t.split():
        if w == w.upper() and len(w) > 2 and w.isalpha():
            w = w[0] + w[1:].lower()
        words.append(w)
    return " ".join(words)


def map_label_doc(doc: Dict[str, Any], display_name: str) -> LabelDetails:
    """Map an openFDA label result onto LabelDetails"""
    openfda = doc.get("openfda") or {}

    interactions = [
        _join(doc.get("drug_interactions")),
        _join(doc.get("patient_information")),
        _join(doc.get("information_for_patients")),
    ]
    warnings = [
        _join(doc.get("warnings")),
        _join(doc.get("warnings_and_cautions")),
        _join(doc.get("contraindications")),
    ]
    ingredients = (
        (openfda.get("substance_name") or [])
        + (openfda.get("pharm_class_pe") or [])
        + (openfda.get("pharm_class_epc") or [])
    )

    brand = (openfda.get("brand_name") or [None])[0]
    generic = (openfda.get("generic_name") or [None])[0]
    needle = display_name.lower()
    if brand and needle in brand.lower():
        chosen = brand
    elif generic and needle in generic.lower():
        chosen = generic
    else:
        chosen = brand or generic or display_name

    return LabelDetails(
        title=normalized_display_name(chosen),
        uses=clean_label_text(_join(doc.get("indications_and_usage"))),
        dosage=clean_label_text(_join(doc.get("dosage_and_administration"))),
        interactions=clean_label_text("\n\n".join(p for p in interactions if p)),
        warnings=clean_label_text("\n\n".join(p for p in warnings if p)),
        side_effects=clean_label_text(_join(doc.get("adverse_reactions"))),
        ingredients=_uniq([i.strip() for i in ingredients]),
    )


def _strength_sort_key(strength: str):
    parts = strength.split(" ", 1)
    try:
        return (parts[1].lower() if len(parts) > 1 else "", float(parts[0]), strength)
    except ValueError:
        return ("~", float("inf"), strength)


def clean_strength(raw: str) -> str:
    """First two tokens of an NDC strength, e.g. '500 mg/1'"""
    parts = raw.split()
    return f"{parts[0]} {parts[1]}" if len(parts) >= 2 else raw


class OpenFDAClient:
    """
    Client for the openFDA drug label and NDC endpoints

    Label lookups never raise on HTTP failures; a miss yields a blank
    LabelDetails shell so callers can proceed without label data.
    """

    def __init__(
        self,
        label_url: Optional[str] = None,
        ndc_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.label_url = label_url or settings.OPENFDA_LABEL_URL
        self.ndc_url = ndc_url or settings.OPENFDA_NDC_URL
        self.timeout = timeout or settings.OPENFDA_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._details_cache: Dict[str, LabelDetails] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _first_result(self, url: str, search: str, limit: int = 1) -> Optional[List[Dict[str, Any]]]:
        params = {"search": search, "limit": limit}
        if settings.OPENFDA_API_KEY:
            params["api_key"] = settings.OPENFDA_API_KEY
        try:
            client = await self._get_client()
            response = await client.get(url, params=params)
            if response.status_code == 404:
                # openFDA answers "no matches" with 404
                return None
            response.raise_for_status()
            results = response.json().get("results") or []
            return results or None
        except httpx.HTTPError as e:
            logger.warning(f"openFDA request failed for {search!r}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"openFDA returned invalid JSON for {search!r}: {e}")
            return None

    async def _query_label(self, field_name: str, value: str) -> Optional[Dict[str, Any]]:
        exact = await self._first_result(self.label_url, f'{field_name}:"{value}"')
        if exact:
            return exact[0]
        loose = await self._first_result(self.label_url, f"{field_name}:{value}")
        return loose[0] if loose else None

    async def fetch_details(self, name: str) -> Optional[LabelDetails]:
        """
        Fetch label sections for a medication name

        Args:
            name: Brand or generic name as typed by the user

        Returns:
            LabelDetails (blank shell on miss), or None for a blank name
        """
        trimmed = (name or "").strip()
        if not trimmed:
            return None

        key = trimmed.lower()
        if key in self._details_cache:
            return self._details_cache[key]

        doc = (
            await self._query_label("openfda.brand_name", trimmed)
            or await self._query_label("openfda.generic_name", trimmed)
        )
        if doc is None:
            hits = await self._first_result(self.label_url, f"description:{trimmed}")
            doc = hits[0] if hits else None

        if doc is not None:
            details = map_label_doc(doc, trimmed)
        else:
            logger.info(f"No openFDA label found for {trimmed}")
            details = LabelDetails(title=normalized_display_name(trimmed))

        self._details_cache[key] = details
        return details

    async def _query_ndc(self, field_name: str, value: str) -> List[str]:
        results = await self._first_result(self.ndc_url, f'{field_name}:"{value}"', limit=25) or []
        strengths = []
        for product in results:
            for ingredient in product.get("active_ingredients") or []:
                if ingredient.get("strength"):
                    strengths.append(clean_strength(ingredient["strength"]))
        return sorted(_uniq(strengths), key=_strength_sort_key)

    async def fetch_dosage_options(self, name: str) -> List[str]:
        """Marketed strengths for a medication, brand name first"""
        trimmed = (name or "").strip()
        if not trimmed:
            return []
        return (
            await self._query_ndc("brand_name", trimmed)
            or await self._query_ndc("generic_name", trimmed)
        )


# Singleton instance
openfda_client = OpenFDAClient()

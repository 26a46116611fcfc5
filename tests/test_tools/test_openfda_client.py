"""
Tests for openFDA Label Client
HTTP is served by httpx.MockTransport; nothing leaves the process
"""

import httpx
import pytest

from tools.openfda_client import (
    LabelDetails,
    OpenFDAClient,
    clean_label_text,
    clean_strength,
    map_label_doc,
    normalized_display_name,
)


LABEL_URL = "https://fda.test/drug/label.json"
NDC_URL = "https://fda.test/drug/ndc.json"

DOXY_DOC = {
    "openfda": {
        "brand_name": ["DORYX"],
        "generic_name": ["DOXYCYCLINE HYCLATE"],
        "substance_name": ["DOXYCYCLINE"],
        "pharm_class_epc": ["Tetracycline-class Drug [EPC]"],
    },
    "indications_and_usage": ["Treats infections."],
    "dosage_and_administration": ["Take with food twice daily."],
    "drug_interactions": ["Avoid antacids and iron."],
    "warnings": ["Photosensitivity."],
    "adverse_reactions": ["Nausea."],
}


def make_client(handler) -> OpenFDAClient:
    return OpenFDAClient(
        label_url=LABEL_URL,
        ndc_url=NDC_URL,
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestHelpers:
    """Pure mapping helpers"""

    def test_clean_label_text(self):
        assert clean_label_text("a\r\r\r\rb •c") == "a\n\nb\n• c"

    def test_normalized_display_name(self):
        assert normalized_display_name("DOXYCYCLINE HYCLATE") == "Doxycycline Hyclate"
        assert normalized_display_name("Advil PM") == "Advil PM"

    def test_clean_strength(self):
        assert clean_strength("500 mg/1") == "500 mg/1"
        assert clean_strength("100 mg/5mL extra") == "100 mg/5mL"
        assert clean_strength("unknown") == "unknown"

    def test_map_label_doc(self):
        details = map_label_doc(DOXY_DOC, "doxycycline")

        assert details.title == "Doxycycline Hyclate"
        assert details.uses == "Treats infections."
        assert details.interactions == "Avoid antacids and iron."
        assert details.ingredients == ["DOXYCYCLINE", "Tetracycline-class Drug [EPC]"]
        assert "Take with food twice daily." in details.combined_text

    def test_map_label_doc_prefers_brand_match(self):
        assert map_label_doc(DOXY_DOC, "doryx").title == "Doryx"


class TestFetchDetails:
    """Label lookups"""

    @pytest.mark.asyncio
    async def test_brand_hit(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["search"])
            return httpx.Response(200, json={"results": [DOXY_DOC]})

        client = make_client(handler)
        details = await client.fetch_details("Doryx")

        assert details.title == "Doryx"
        assert seen == ['openfda.brand_name:"Doryx"']
        await client.close()

    @pytest.mark.asyncio
    async def test_falls_back_to_generic_then_caches(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            search = request.url.params["search"]
            seen.append(search)
            if search.startswith("openfda.generic_name"):
                return httpx.Response(200, json={"results": [DOXY_DOC]})
            return httpx.Response(404, json={"error": {"code": "NOT_FOUND"}})

        client = make_client(handler)
        first = await client.fetch_details("doxycycline")
        second = await client.fetch_details("Doxycycline")

        assert first is second
        assert seen == [
            'openfda.brand_name:"doxycycline"',
            "openfda.brand_name:doxycycline",
            'openfda.generic_name:"doxycycline"',
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_miss_returns_blank_shell(self):
        client = make_client(lambda request: httpx.Response(404))

        details = await client.fetch_details("NOTAREALDRUG")

        assert isinstance(details, LabelDetails)
        assert details.is_empty
        assert details.title == "Notarealdrug"
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_is_soft(self):
        client = make_client(lambda request: httpx.Response(500))
        details = await client.fetch_details("anything")
        assert details.is_empty
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_is_soft(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        client = make_client(handler)
        details = await client.fetch_details("anything")
        assert details.is_empty
        await client.close()

    @pytest.mark.asyncio
    async def test_blank_name(self):
        client = make_client(lambda request: httpx.Response(200, json={"results": [DOXY_DOC]}))
        assert await client.fetch_details("   ") is None
        await client.close()


class TestDosageOptions:
    """NDC strengths"""

    @pytest.mark.asyncio
    async def test_strengths_sorted_and_deduplicated(self):
        products = [
            {"active_ingredients": [{"name": "X", "strength": "500 mg/1"}]},
            {"active_ingredients": [{"name": "X", "strength": "250 mg/1"}]},
            {"active_ingredients": [{"name": "X", "strength": "500 mg/1"}]},
        ]
        client = make_client(lambda request: httpx.Response(200, json={"results": products}))

        assert await client.fetch_dosage_options("amoxicillin") == ["250 mg/1", "500 mg/1"]
        await client.close()

    @pytest.mark.asyncio
    async def test_no_products(self):
        client = make_client(lambda request: httpx.Response(404))
        assert await client.fetch_dosage_options("amoxicillin") == []
        await client.close()

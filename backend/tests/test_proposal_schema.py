"""
test_proposal_schema.py — document parsing and camelCase serialization.
"""

from app.models.proposal_schema import MarkupConfig, MarkupType, ProposalData, VatRule

from conftest import make_proposal_document


def test_defaults_for_minimal_document():
    p = ProposalData.model_validate({"id": "p-min"})
    assert p.pricing.vat_percent == 15
    assert p.pricing.markups.hotels.type == MarkupType.PERCENTAGE
    assert p.inclusions.flights is True
    assert p.hotel_options == []
    assert p.is_deleted is False


def test_unknown_keys_ignored():
    p = ProposalData.model_validate(make_proposal_document(legacyField={"x": 1}))
    assert "legacyField" not in p.to_document()


def test_document_uses_editor_keys(sample_proposal):
    doc = sample_proposal.to_document()
    assert doc["proposalName"] == "Riyadh Leadership Summit"
    assert doc["pricing"]["markups"]["customItems"]["value"] == 5
    flight = doc["flightOptions"][0]
    assert flight["outbound"][0]["from"] == "JED"
    assert flight["return"][0]["to"] == "JED"
    assert flight["quotes"][0]["class"] == "Economy"
    assert doc["hotelOptions"][0]["roomTypes"][0]["includeInSummary"] is True


def test_vat_rule_case_insensitive():
    doc = make_proposal_document()
    doc["hotelOptions"][0]["vatRule"] = "International"
    p = ProposalData.model_validate(doc)
    assert p.hotel_options[0].vat_rule == VatRule.INTERNATIONAL


def test_snake_case_names_accepted():
    p = ProposalData(id="p-1", proposal_name="Direct", customer_name="Acme")
    assert p.to_document()["customerName"] == "Acme"


def test_markup_type_written_in_editor_case():
    doc = make_proposal_document()
    assert doc["pricing"]["markups"]["meetings"]["type"] == "fixed"
    markups = ProposalData.model_validate(doc).to_document()["pricing"]["markups"]
    assert markups["meetings"]["type"] == "Fixed"
    assert markups["hotels"]["type"] == "Percentage"
    assert MarkupConfig.model_validate({"type": "FIXED"}).type == MarkupType.FIXED

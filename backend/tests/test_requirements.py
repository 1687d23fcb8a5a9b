"""
Adoption Intake Backend: Requirement Validator Unit Tests
============================================================

What:  missing_documents() and summarize() over plain tag lists.
How:   Pure functions, no database.
"""

import pytest

from intake.models.service import DocumentType
from intake.services.requirements import missing_documents, normalize_required, summarize


class TestMissingDocuments:

    def test_nothing_uploaded_returns_all_required_in_order(self):
        assert missing_documents(["SKCK", "HEALTH_CERTIFICATE"], set()) == [
            "SKCK",
            "HEALTH_CERTIFICATE",
        ]

    def test_partial_upload(self):
        assert missing_documents(["SKCK", "HEALTH_CERTIFICATE"], {"SKCK"}) == ["HEALTH_CERTIFICATE"]

    def test_complete_upload(self):
        assert missing_documents(["SKCK", "HEALTH_CERTIFICATE"], {"HEALTH_CERTIFICATE", "SKCK"}) == []

    def test_empty_requirements_always_satisfied(self):
        assert missing_documents([], set()) == []
        assert missing_documents([], {"PHOTO", "OTHER"}) == []

    def test_duplicate_requirements_reported_once(self):
        assert missing_documents(["SKCK", "PHOTO", "SKCK"], set()) == ["SKCK", "PHOTO"]

    def test_extra_uploads_ignored(self):
        assert missing_documents(["PHOTO"], {"PHOTO", "OTHER", "SKCK"}) == []

    def test_repeated_uploads_count_once(self):
        uploaded = ["SKCK", "SKCK", "SKCK"]
        assert missing_documents(["SKCK", "PHOTO"], uploaded) == ["PHOTO"]

    def test_accepts_enum_members(self):
        missing = missing_documents(
            [DocumentType.SKCK, DocumentType.PHOTO],
            {DocumentType.PHOTO},
        )
        assert missing == ["SKCK"]

    @pytest.mark.parametrize(
        "required, uploaded",
        [
            (["SKCK", "PHOTO", "OTHER"], {"PHOTO"}),
            (["FAMILY_CONSENT", "SKCK", "FAMILY_CONSENT"], {"SKCK"}),
            (["BIRTH_CERTIFICATE"], set()),
        ],
    )
    def test_equals_deduplicated_difference(self, required, uploaded):
        expected = [t for t in dict.fromkeys(required) if t not in uploaded]
        assert missing_documents(required, uploaded) == expected


class TestSummarize:

    def test_splits_provided_and_missing(self):
        wanted, provided, missing = summarize(
            ["SKCK", "HEALTH_CERTIFICATE", "PHOTO"],
            {"PHOTO", "OTHER"},
        )
        assert wanted == ["SKCK", "HEALTH_CERTIFICATE", "PHOTO"]
        assert provided == ["PHOTO"]
        assert missing == ["SKCK", "HEALTH_CERTIFICATE"]

    def test_normalize_keeps_first_occurrence(self):
        assert normalize_required(["PHOTO", "SKCK", "PHOTO"]) == ["PHOTO", "SKCK"]

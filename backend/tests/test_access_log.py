"""
Adoption Intake Backend: Access Log Tests
============================================

What:  Resource tagging and level choice of the request logging middleware.
"""

import logging

import pytest

from intake.middleware.logging import level_for, resource_ids


class TestResourceIds:

    def test_application_path(self):
        assert resource_ids("/api/applications/12/submit") == {"application_id": 12}

    def test_document_path(self):
        assert resource_ids("/api/documents/5") == {"document_id": 5}

    def test_collection_path_has_no_ids(self):
        assert resource_ids("/api/applications") == {}


class TestLevelFor:

    @pytest.mark.parametrize(
        "status, path, expected",
        [
            (200, "/api/applications/1", logging.INFO),
            (409, "/api/applications/1/submit", logging.INFO),
            (422, "/api/applications/1/submit", logging.INFO),
            (409, "/api/users", logging.WARNING),
            (404, "/api/applications/1", logging.WARNING),
            (500, "/api/applications/1/submit", logging.ERROR),
        ],
    )
    def test_levels(self, status, path, expected):
        assert level_for(status, path) == expected

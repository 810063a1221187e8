"""
test_proposal_routes.py — HTTP layer with dependency overrides.

The repository is replaced by an AsyncMock and the caller by a plain user
object, so no database is touched.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_current_user, get_repository
from app.db import get_db
from app.main import app
from app.models.proposal_schema import ProposalData
from app.services.proposal_repository import ProposalRepository

from conftest import make_proposal_document, make_user


@pytest.fixture
def repo():
    mock = AsyncMock(spec=ProposalRepository)
    mock.list_proposals.return_value = []
    mock.get_proposal.return_value = None
    mock.proposal_exists.return_value = False
    return mock


@pytest.fixture
def caller():
    return make_user("agent", email="agent@acme.test", company_id="acme")


@pytest.fixture
def client(repo, caller):
    async def _fake_db():
        session = MagicMock()
        session.get = AsyncMock(return_value=None)
        yield session

    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_current_user] = lambda: caller
    app.dependency_overrides[get_db] = _fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestListAndSave:

    def test_list_returns_documents(self, client, repo, sample_proposal):
        repo.list_proposals.return_value = [sample_proposal]
        resp = client.get("/api/proposals")
        assert resp.status_code == 200
        body = resp.json()
        assert body[0]["id"] == "prop-0001"
        assert body[0]["proposalName"] == "Riyadh Leadership Summit"

    def test_save_rejects_mismatched_id(self, client, repo):
        resp = client.put("/api/proposals/other-id", json=make_proposal_document())
        assert resp.status_code == 422
        repo.save_proposal.assert_not_called()

    def test_save_new_defaults_author_and_company(self, client, repo):
        doc = make_proposal_document(createdBy=None, companyId=None)
        resp = client.put("/api/proposals/prop-0001", json=doc)
        assert resp.status_code == 200
        saved: ProposalData = repo.save_proposal.call_args.args[0]
        assert saved.created_by == "agent@acme.test"
        assert saved.company_id == "acme"
        assert resp.json()["createdBy"] == "agent@acme.test"

    def test_save_existing_keeps_author_and_company(self, client, repo, sample_proposal):
        repo.get_proposal.return_value = sample_proposal
        repo.proposal_exists.return_value = True
        doc = make_proposal_document(createdBy="someone@else.test", companyId="globex")
        resp = client.put("/api/proposals/prop-0001", json=doc)
        assert resp.status_code == 200
        saved: ProposalData = repo.save_proposal.call_args.args[0]
        assert saved.created_by == "agent@acme.test"
        assert saved.company_id == "acme"
        assert saved.created_at == sample_proposal.created_at

    def test_save_over_invisible_proposal_forbidden(self, client, repo):
        repo.proposal_exists.return_value = True
        resp = client.put("/api/proposals/prop-0001", json=make_proposal_document())
        assert resp.status_code == 403
        repo.save_proposal.assert_not_called()


class TestDelete:

    def test_delete_invisible_is_404(self, client, repo):
        resp = client.delete("/api/proposals/prop-0001")
        assert resp.status_code == 404
        repo.delete_proposal.assert_not_called()

    def test_delete_visible(self, client, repo, sample_proposal):
        repo.get_proposal.return_value = sample_proposal
        resp = client.delete("/api/proposals/prop-0001")
        assert resp.status_code == 200
        assert resp.json() == {"id": "prop-0001", "isDeleted": True}
        repo.delete_proposal.assert_awaited_once_with("prop-0001")


class TestSummaryAndPdf:

    def test_summary(self, client, repo, sample_proposal):
        repo.get_proposal.return_value = sample_proposal
        resp = client.get("/api/proposals/prop-0001/summary")
        assert resp.status_code == 200
        body = resp.json()
        assert body["currency"] == "SAR"
        assert [o["title"] for o in body["options"]] == ["Option 1: Grand Palace", "Option 2: Desert Rose"]

    def test_summary_missing_is_404(self, client):
        assert client.get("/api/proposals/nope/summary").status_code == 404

    def test_preview_without_hotels(self, client, repo):
        resp = client.post("/api/proposals/summary/preview", json=make_proposal_document(hotelOptions=[]))
        assert resp.status_code == 200
        options = resp.json()["options"]
        assert len(options) == 1
        assert options[0]["option_index"] is None
        repo.save_proposal.assert_not_called()

    def test_pdf(self, client, repo, sample_proposal, tmp_path, monkeypatch):
        monkeypatch.setattr("app.services.report_engine.DOWNLOAD_DIR", str(tmp_path))
        repo.get_proposal.return_value = sample_proposal
        resp = client.get("/api/proposals/prop-0001/pdf")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF")


class TestAppShell:

    def test_unauthenticated_is_401(self, repo):
        async def _fake_db():
            yield MagicMock()

        app.dependency_overrides[get_repository] = lambda: repo
        app.dependency_overrides[get_db] = _fake_db
        try:
            resp = TestClient(app).get("/api/proposals")
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 401

    def test_health_and_headers(self):
        resp = TestClient(app).get("/health", headers={"X-Request-ID": "req-42"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "active"
        assert resp.headers["X-Request-ID"] == "req-42"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Process-Time" in resp.headers

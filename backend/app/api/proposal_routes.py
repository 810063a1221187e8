"""
Proposal Routes — storage, investment summary and PDF export.

GET    /api/proposals                   — proposals visible to the caller
PUT    /api/proposals/{proposal_id}     — create or overwrite a proposal
DELETE /api/proposals/{proposal_id}     — soft delete
GET    /api/proposals/{proposal_id}/summary — per-option investment summary
POST   /api/proposals/summary/preview   — summary of an unsaved proposal
GET    /api/proposals/{proposal_id}/pdf — branded proposal PDF
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_repository
from app.db import get_db
from app.exceptions import (
    ProposalAccessError,
    ProposalNotFoundError,
    ReportGenerationError,
)
from app.models.orm_models import Company, User
from app.models.proposal_schema import ProposalData
from app.services.proposal_repository import ProposalRepository
from app.services.report_engine import ProposalReportEngine
from app.services.summary_engine import build_investment_summary

router = APIRouter(prefix="/api/proposals", tags=["Proposals"])
logger = logging.getLogger("proposals-api")


def _summary_payload(proposal: ProposalData) -> Dict[str, Any]:
    return {
        "proposal_id": proposal.id,
        "currency": proposal.pricing.currency,
        "vat_percent": proposal.pricing.vat_percent,
        "options": [s.to_dict() for s in build_investment_summary(proposal)],
    }


async def _load_visible(repo: ProposalRepository, proposal_id: str, user: User) -> ProposalData:
    proposal = await repo.get_proposal(proposal_id, user)
    if proposal is None:
        raise ProposalNotFoundError(proposal_id)
    return proposal


async def _load_writable(repo: ProposalRepository, proposal_id: str, user: User) -> Optional[ProposalData]:
    """The visible proposal, None for a new id, or ProposalAccessError."""
    existing = await repo.get_proposal(proposal_id, user)
    if existing is None and await repo.proposal_exists(proposal_id):
        raise ProposalAccessError(
            f"Not allowed to modify proposal {proposal_id}",
            details={"proposal_id": proposal_id},
        )
    return existing


@router.get("")
async def list_proposals(
    user: User = Depends(get_current_user),
    repo: ProposalRepository = Depends(get_repository),
) -> List[Dict[str, Any]]:
    proposals = await repo.list_proposals(user)
    return [p.to_document() for p in proposals]


@router.put("/{proposal_id}")
async def save_proposal(
    proposal_id: str,
    proposal: ProposalData,
    user: User = Depends(get_current_user),
    repo: ProposalRepository = Depends(get_repository),
):
    if proposal.id != proposal_id:
        raise HTTPException(status_code=422, detail="Body id does not match path id")

    try:
        existing = await _load_writable(repo, proposal_id, user)
    except ProposalAccessError as e:
        logger.warning(e.message, extra={"proposal_id": proposal_id})
        raise HTTPException(status_code=403, detail=e.message)

    if existing:
        # Ownership stays with the stored record
        proposal.created_by = existing.created_by or proposal.created_by or user.email
        proposal.company_id = existing.company_id or proposal.company_id or user.company_id
        proposal.created_at = existing.created_at
    else:
        proposal.created_by = proposal.created_by or user.email
        proposal.company_id = proposal.company_id or user.company_id
    proposal.last_modified = datetime.now(timezone.utc)
    proposal.is_deleted = False

    await repo.save_proposal(proposal)
    return proposal.to_document()


@router.delete("/{proposal_id}")
async def delete_proposal(
    proposal_id: str,
    user: User = Depends(get_current_user),
    repo: ProposalRepository = Depends(get_repository),
):
    try:
        await _load_visible(repo, proposal_id, user)
    except ProposalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    await repo.delete_proposal(proposal_id)
    return {"id": proposal_id, "isDeleted": True}


@router.post("/summary/preview")
async def preview_summary(
    proposal: ProposalData,
    user: User = Depends(get_current_user),
):
    """Summary of an unsaved proposal body; nothing is persisted."""
    return _summary_payload(proposal)


@router.get("/{proposal_id}/summary")
async def get_summary(
    proposal_id: str,
    user: User = Depends(get_current_user),
    repo: ProposalRepository = Depends(get_repository),
):
    try:
        proposal = await _load_visible(repo, proposal_id, user)
    except ProposalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return _summary_payload(proposal)


@router.get("/{proposal_id}/pdf")
async def get_pdf(
    proposal_id: str,
    user: User = Depends(get_current_user),
    repo: ProposalRepository = Depends(get_repository),
    db: AsyncSession = Depends(get_db),
):
    try:
        proposal = await _load_visible(repo, proposal_id, user)
    except ProposalNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    tenant_settings: Dict[str, Any] = {}
    if proposal.company_id:
        company = await db.get(Company, proposal.company_id)
        if company:
            tenant_settings["company_name"] = company.name
            if company.primary_color:
                tenant_settings["theme_color_hex"] = company.primary_color

    engine = ProposalReportEngine(tenant_settings)
    try:
        path = await run_in_threadpool(engine.generate, proposal)
    except ReportGenerationError as e:
        raise HTTPException(status_code=500, detail=e.message)

    filename = f"{(proposal.proposal_name or 'Proposal').replace(' ', '_')}.pdf"
    return FileResponse(path, media_type="application/pdf", filename=filename)

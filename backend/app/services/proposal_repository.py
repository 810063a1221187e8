"""
Proposal Repository — role-scoped persistence of proposal documents.

Visibility:
  - super_admin / owner : every proposal
  - admin               : proposals of their own company
  - anyone else         : proposals they authored

Listing is fail-soft: a storage failure is logged and yields an empty list,
so callers must read ``[]`` as "nothing found or unavailable", never as a
confirmed zero.  Save and delete failures propagate.
"""
import logging
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import false, select, true
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.orm_models import ELEVATED_ROLES, ROLE_ADMIN, ProposalRecord
from app.models.proposal_schema import ProposalData

logger = logging.getLogger("proposals-repo")

SCOPE_ALL = "all"
SCOPE_COMPANY = "company"
SCOPE_AUTHOR = "author"


def visibility_scope(user: Any) -> Tuple[str, Optional[str]]:
    """
    Resolve a user to ``(scope, key)``.

    ``user`` only needs ``role``, ``company_id`` and ``email`` attributes.
    """
    role = (getattr(user, "role", None) or "").lower()
    if role in ELEVATED_ROLES:
        return SCOPE_ALL, None
    if role == ROLE_ADMIN:
        return SCOPE_COMPANY, getattr(user, "company_id", None)
    return SCOPE_AUTHOR, getattr(user, "email", None)


def visibility_clause(user: Any):
    """SQL predicate selecting the proposals ``user`` may see."""
    scope, key = visibility_scope(user)
    if scope == SCOPE_ALL:
        return true()
    if not key:
        # admin without a company / user without an email sees nothing
        return false()
    column = ProposalRecord.company_id if scope == SCOPE_COMPANY else ProposalRecord.created_by
    return column == key


def _to_record(proposal: ProposalData) -> ProposalRecord:
    return ProposalRecord(
        id=proposal.id,
        company_id=proposal.company_id,
        created_by=proposal.created_by,
        last_modified=proposal.last_modified,
        is_deleted=proposal.is_deleted,
        document=proposal.to_document(),
    )


def _to_proposal(record: ProposalRecord) -> Optional[ProposalData]:
    try:
        proposal = ProposalData.model_validate(record.document)
    except ValidationError as e:
        logger.warning(f"Skipping unreadable proposal document {record.id}: {e}")
        return None
    # The flag column is authoritative for soft delete
    proposal.is_deleted = bool(record.is_deleted)
    return proposal


class ProposalRepository:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_proposals(self, user: Any) -> List[ProposalData]:
        """Visible, non-deleted proposals, newest ``last_modified`` first."""
        stmt = (
            select(ProposalRecord)
            .where(visibility_clause(user), ProposalRecord.is_deleted.is_(False))
            .order_by(ProposalRecord.last_modified.desc())
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                records = result.scalars().all()
        except Exception as e:
            logger.error(f"Error fetching proposals: {e}")
            return []

        proposals = []
        for record in records:
            proposal = _to_proposal(record)
            if proposal is not None:
                proposals.append(proposal)
        return proposals

    async def get_proposal(self, proposal_id: str, user: Any) -> Optional[ProposalData]:
        """One visible, non-deleted proposal, or None."""
        stmt = select(ProposalRecord).where(
            ProposalRecord.id == proposal_id,
            visibility_clause(user),
            ProposalRecord.is_deleted.is_(False),
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            record = result.scalar_one_or_none()
        return _to_proposal(record) if record is not None else None

    async def proposal_exists(self, proposal_id: str) -> bool:
        """True if any record, deleted or not, holds this id."""
        async with self.session_factory() as session:
            record = await session.get(ProposalRecord, proposal_id)
        return record is not None

    async def save_proposal(self, proposal: ProposalData) -> None:
        """Full-record upsert keyed by ``proposal.id``; last write wins."""
        async with self.session_factory() as session:
            await session.merge(_to_record(proposal))
            await session.commit()
        logger.info("proposal saved", extra={"proposal_id": proposal.id})

    async def delete_proposal(self, proposal_id: str) -> None:
        """Soft delete: flag the existing record, keep the document."""
        async with self.session_factory() as session:
            record = await session.get(ProposalRecord, proposal_id)
            if record is None:
                logger.warning(f"Soft delete skipped, proposal {proposal_id} does not exist")
                return
            record.is_deleted = True
            record.document = {**record.document, "isDeleted": True}
            await session.commit()
        logger.info("proposal soft-deleted", extra={"proposal_id": proposal_id})

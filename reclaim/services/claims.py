import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlmodel import Session, select

from reclaim.errors import InvalidState, NotFound
from reclaim.models.claim import Claim
from reclaim.models.item import ItemReport
from reclaim.models.user import Actor
from reclaim.services.activity_log import ActivityLogRecorder
from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)

CLAIM_CODE_PREFIX = "CLM-"
CLAIM_CODE_LENGTH = 9
CLAIM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_claim_code() -> str:
    suffix = "".join(secrets.choice(CLAIM_CODE_ALPHABET) for _ in range(CLAIM_CODE_LENGTH))
    return CLAIM_CODE_PREFIX + suffix


class ClaimLifecycle:
    """Ownership claims: pending -> approved | rejected, decided by staff.

    Security answers are stored for a human to compare against the item's
    questions; nothing here approves a claim automatically.
    """

    def __init__(self, engine, recorder: ActivityLogRecorder, code_factory=generate_claim_code):
        self.engine = engine
        self.recorder = recorder
        self.code_factory = code_factory

    def _unused_code(self, session: Session) -> str:
        while True:
            code = self.code_factory()
            taken = session.exec(select(Claim.id).where(Claim.claim_code == code)).first()
            if not taken:
                return code
            logger.warning("claim code collision on %s, regenerating", code)

    def submit_claim(
        self,
        item_id: uuid.UUID,
        claimant: Actor,
        answers: List[str],
        proof_photo_ref: Optional[str] = None,
    ) -> Claim:
        with Session(self.engine, expire_on_commit=False) as session:
            item = session.get(ItemReport, item_id)
            if not item or item.status == "rejected":
                raise NotFound("Item not found")

            code = self._unused_code(session)

            claim = Claim(
                claim_code=code,
                claimant_id=claimant.user_id,
                item_id=item.id,
                answers=[a for a in answers if a.strip()],
                proof_photo_ref=proof_photo_ref,
            )
            session.add(claim)

            self.recorder.record(
                user_id=claimant.user_id,
                user_name=claimant.name,
                action="claim_submitted",
                item_id=item.id,
                item_type=item.item_type,
                details=f"Submitted claim for {item.item_type} (Code: {code})",
                session=session,
            )
            session.commit()
            session.refresh(claim)

        logger.info("claim submitted code=%s item=%s by=%s", claim.claim_code, item_id, claimant.user_id)
        return claim

    def lookup_claim_by_code(self, code: str) -> Optional[Claim]:
        with Session(self.engine, expire_on_commit=False) as session:
            return session.exec(select(Claim).where(Claim.claim_code == code)).first()

    def decide_claim(self, claim_id: uuid.UUID, approve: bool, admin: Actor) -> Claim:
        # claim, item and log entry commit together or not at all
        with Session(self.engine, expire_on_commit=False) as session:
            claim = session.get(Claim, claim_id)
            if not claim:
                raise NotFound("Claim not found")

            if claim.status != "pending":
                logger.warning("refused decision on claim code=%s status=%s", claim.claim_code, claim.status)
                raise InvalidState(f"Claim is already {claim.status}")

            item = session.get(ItemReport, claim.item_id)
            if not item or item.status == "rejected":
                raise NotFound("Item for this claim no longer exists")

            claim.status = "approved" if approve else "rejected"
            claim.decided_at = datetime.now(timezone.utc)
            claim.decided_by = admin.user_id
            session.add(claim)

            if approve:
                item.status = "claimed"
                session.add(item)

            self.recorder.record(
                user_id=admin.user_id,
                user_name=admin.name,
                action="claim_approved" if approve else "claim_rejected",
                item_id=item.id,
                item_type=item.item_type,
                details=(
                    f"Approved claim for {item.item_type} (Code: {claim.claim_code})"
                    if approve
                    else f"Rejected claim for {item.item_type} (Code: {claim.claim_code})"
                ),
                session=session,
            )
            session.commit()
            session.refresh(claim)

        logger.info("claim %s code=%s by=%s", claim.status, claim.claim_code, admin.user_id)
        return claim

    def get_claim(self, claim_id: uuid.UUID) -> Claim:
        with Session(self.engine, expire_on_commit=False) as session:
            claim = session.get(Claim, claim_id)

        if not claim:
            raise NotFound("Claim not found")

        return claim

    def list_claims(
        self,
        status: Optional[str] = None,
        claimant_id: Optional[str] = None,
    ) -> List[Claim]:
        query = select(Claim).order_by(Claim.submitted_at.desc())

        if status:
            query = query.where(Claim.status == status)

        if claimant_id:
            query = query.where(Claim.claimant_id == claimant_id)

        with Session(self.engine, expire_on_commit=False) as session:
            return list(session.exec(query).all())

"""
Campaign lookup and roster. Campaign CRUD lives elsewhere; the calendar only needs to know
a campaign exists and who counts toward its totals.
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupcal.core.errors import NotFoundError, PermissionDeniedError, StoreUnavailableError
from groupcal.models.campaign import Campaign, CampaignMember


def get_campaign(db: Session, campaign_id: str) -> Campaign:
    row = db.get(Campaign, campaign_id) if campaign_id else None
    if row is None:
        raise NotFoundError("Campaign not found")
    return row


def get_roster(db: Session, campaign_id: str) -> list[str]:
    """Usernames of every member, sorted. These are the users counted in aggregate totals."""
    try:
        rows = (
            db.query(CampaignMember.username)
            .filter(CampaignMember.campaign_id == campaign_id)
            .order_by(CampaignMember.username.asc())
            .all()
        )
    except SQLAlchemyError as e:
        raise StoreUnavailableError("Campaign store unavailable") from e
    return [r[0] for r in rows]


def is_member(db: Session, campaign_id: str, username: str) -> bool:
    return (
        db.query(CampaignMember)
        .filter(CampaignMember.campaign_id == campaign_id, CampaignMember.username == username)
        .first()
        is not None
    )


def require_access(db: Session, campaign_id: str, username: str, is_admin: bool = False) -> Campaign:
    """Campaign if the caller may see it (admins see everything). Raises NotFound / PermissionDenied."""
    campaign = get_campaign(db, campaign_id)
    if not is_admin and not is_member(db, campaign_id, username):
        raise PermissionDeniedError("Not a member of this campaign")
    return campaign

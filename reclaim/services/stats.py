from pydantic import BaseModel

from reclaim.services.store import LifecycleStore


class Notification(BaseModel):
    id: str
    type: str  # "info", "success", "warning"
    title: str
    message: str


class UserSummary(BaseModel):
    items_reported: int
    items_claimed: int
    verified_items: int
    pending_actions: int
    notifications: list[Notification]


class DashboardCounts(BaseModel):
    pending_items: int
    verified_items: int
    claimed_items: int
    pending_claims: int
    activity_entries: int


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def build_notifications(pending_reports: int, pending_claims: int, approved_claims: int) -> list[Notification]:
    notifications = []

    if pending_reports > 0:
        notifications.append(Notification(
            id="pending-reports",
            type="warning",
            title="Pending Item Reports",
            message=f"You have {_plural(pending_reports, 'item report')} waiting for admin verification.",
        ))

    if pending_claims > 0:
        notifications.append(Notification(
            id="pending-claims",
            type="info",
            title="Pending Claims",
            message=f"You have {_plural(pending_claims, 'claim')} under review by admin.",
        ))

    if approved_claims > 0:
        item_word = "items" if approved_claims > 1 else "item"
        notifications.append(Notification(
            id="approved-claims",
            type="success",
            title="Approved Claims",
            message=(
                f"You have {_plural(approved_claims, 'approved claim')}. "
                f"Visit the Guard Post to collect your {item_word}."
            ),
        ))

    return notifications


def user_summary(store: LifecycleStore, user_id: str) -> UserSummary:
    reports = store.reports.list_reports(reported_by=user_id)
    claims = store.claims.list_claims(claimant_id=user_id)

    pending_reports = sum(1 for r in reports if r.status == "pending")
    pending_claims = sum(1 for c in claims if c.status == "pending")
    approved_claims = sum(1 for c in claims if c.status == "approved")

    return UserSummary(
        items_reported=len(reports),
        items_claimed=approved_claims,
        verified_items=sum(1 for r in reports if r.status == "verified"),
        pending_actions=pending_reports + pending_claims,
        notifications=build_notifications(pending_reports, pending_claims, approved_claims),
    )


def dashboard_counts(store: LifecycleStore) -> DashboardCounts:
    items = store.reports.list_reports()

    return DashboardCounts(
        pending_items=sum(1 for i in items if i.status == "pending"),
        verified_items=sum(1 for i in items if i.status == "verified"),
        claimed_items=sum(1 for i in items if i.status == "claimed"),
        pending_claims=len(store.claims.list_claims(status="pending")),
        activity_entries=store.activity.count(),
    )

"""
Review queue ordering and aggregate counts.

Ordering is by priority tier (URGENT, ELEVATED, ROUTINE). URGENT and ELEVATED
cases show newest first so fresh escalations surface immediately; ROUTINE
cases are strictly first-in first-out so none of them starve.
"""
from cases.enums import CasePriority, CaseStatus

PRIORITY_RANK = {
    CasePriority.URGENT: 1,
    CasePriority.ELEVATED: 2,
    CasePriority.ROUTINE: 3,
}
UNKNOWN_RANK = len(PRIORITY_RANK) + 1


def _timestamp(case) -> float:
    created = getattr(case, "created_at", None)
    return created.timestamp() if created else 0.0


def queue_sort_key(case):
    rank = PRIORITY_RANK.get(case.priority, UNKNOWN_RANK)
    ts = _timestamp(case)
    # ROUTINE ascending, everything else descending
    return (rank, ts if rank == PRIORITY_RANK[CasePriority.ROUTINE] else -ts)


def order_queue(cases) -> list:
    # sorted() is stable, equal keys keep their input order
    return sorted(cases, key=queue_sort_key)


def queue_stats(cases) -> dict:
    by_status = {s.value: 0 for s in CaseStatus}
    by_priority = {p.value: 0 for p in CasePriority}
    total = 0
    for c in cases:
        total += 1
        if c.status in by_status:
            by_status[c.status] += 1
        if c.priority in by_priority:
            by_priority[c.priority] += 1

    return {
        "total": total,
        "byStatus": by_status,
        "byPriority": by_priority,
        "urgentCount": by_priority[CasePriority.URGENT.value],
        "pendingReviewCount": by_status[CaseStatus.PENDING_REVIEW.value],
    }

import random
from datetime import timedelta

from django.utils import timezone

from cases.enums import CasePriority
from cases.models import Case
from cases.services.queue import PRIORITY_RANK, order_queue, queue_stats


def _cases(n=30, seed=7):
    rng = random.Random(seed)
    base = timezone.now()
    out = []
    for i in range(n):
        c = Case(
            patient_id="pat_test0001",
            chief_complaint=f"complaint {i}",
            priority=rng.choice(list(CasePriority)),
        )
        c.created_at = base - timedelta(minutes=rng.randint(0, 500))
        out.append(c)
    return out


class TestQueueOrdering:

    def test_tiers_then_asymmetric_time(self):
        ordered = order_queue(_cases())
        for a, b in zip(ordered, ordered[1:]):
            ra, rb = PRIORITY_RANK[a.priority], PRIORITY_RANK[b.priority]
            assert ra <= rb
            if ra == rb:
                if a.priority == CasePriority.ROUTINE:
                    assert a.created_at <= b.created_at
                else:
                    assert a.created_at >= b.created_at

    def test_stable_for_equal_keys(self):
        now = timezone.now()
        first, second = Case(priority=CasePriority.ROUTINE), Case(priority=CasePriority.ROUTINE)
        first.created_at = second.created_at = now
        assert order_queue([first, second]) == [first, second]
        assert order_queue([second, first]) == [second, first]

    def test_does_not_mutate_input(self):
        cases = _cases(10)
        snapshot = list(cases)
        order_queue(cases)
        assert cases == snapshot


class TestQueueStats:

    def test_counts(self):
        cases = _cases(20)
        stats = queue_stats(cases)
        assert stats["total"] == 20
        assert sum(stats["byPriority"].values()) == 20
        assert stats["byStatus"]["DRAFT"] == 20
        assert stats["urgentCount"] == sum(1 for c in cases if c.priority == CasePriority.URGENT)
        assert stats["pendingReviewCount"] == 0

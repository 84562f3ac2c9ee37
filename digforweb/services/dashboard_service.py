"""
Dashboard statistics.

Computed from the entity store and cached; the store subscription
registered in ``get_store`` drops the cache after every mutation.
"""
import logging

from digforweb.extensions import cache
from digforweb.models.entities import ACTIVE_CASE_STATUS, EntityKind

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = 'dashboard_stats'
RECENT_PER_KIND = 3
RECENT_LIMIT = 5


def compute_stats(store):
    """
    Summary counts and recent activity.

    Returns:
        dict with total_victims, total_cases, active_cases, total_evidence,
        total_actions and recent_activity (newest first)
    """
    victims = store.list(EntityKind.VICTIM)
    cases = store.list(EntityKind.CASE)
    evidence = store.list(EntityKind.EVIDENCE)
    actions = store.list(EntityKind.ACTION)

    return {
        'total_victims': len(victims),
        'total_cases': len(cases),
        'active_cases': sum(1 for c in cases if c.status.lower() == ACTIVE_CASE_STATUS),
        'total_evidence': len(evidence),
        'total_actions': len(actions),
        'recent_activity': recent_activity(cases, actions),
    }


def recent_activity(cases, actions):
    """Latest cases and forensic actions merged by creation time."""
    entries = [
        {
            'kind': EntityKind.CASE.value,
            'id': c.id,
            'description': f'Case "{c.case_type}" created',
            'timestamp': c.created_at,
        }
        for c in cases[-RECENT_PER_KIND:]
    ] + [
        {
            'kind': EntityKind.ACTION.value,
            'id': a.id,
            'description': f'{a.stage.label} - {a.status.label}',
            'timestamp': a.created_at,
        }
        for a in actions[-RECENT_PER_KIND:]
    ]
    entries.sort(key=lambda entry: (entry['timestamp'] is not None, entry['timestamp']), reverse=True)
    return entries[:RECENT_LIMIT]


def get_dashboard_stats(store):
    stats = cache.get(STATS_CACHE_KEY)
    if stats is None:
        stats = compute_stats(store)
        cache.set(STATS_CACHE_KEY, stats)
    return stats


def invalidate_dashboard_cache(kind=None, operation=None, entity_id=None):
    """Store subscriber: forget cached statistics."""
    cache.delete(STATS_CACHE_KEY)

"""
Demo records loaded into an empty store by ``flask seed-demo``.
"""
import logging
from datetime import date, datetime

from digforweb.models.entities import ActionStatus, EntityKind, ForensicStage

logger = logging.getLogger(__name__)


DEMO_VICTIMS = [
    {
        'ref': 'anderson',
        'name': 'John Anderson',
        'contact': '+1-555-0123',
        'location': 'New York, NY',
        'report_date': date(2025, 12, 1),
        'report_description': 'Reported unauthorized access to corporate email account '
                              'with suspicious activities detected.',
    },
    {
        'ref': 'mitchell',
        'name': 'Sarah Mitchell',
        'contact': '+1-555-0456',
        'location': 'Los Angeles, CA',
        'report_date': date(2025, 12, 3),
        'report_description': 'Mobile device stolen containing sensitive business data '
                              'and personal information.',
    },
]

DEMO_CASES = [
    {
        'ref': 'email',
        'victim': 'anderson',
        'case_type': 'Email Compromise',
        'incident_date': date(2025, 11, 28),
        'summary': 'Investigation into unauthorized email access. Multiple login attempts '
                   'from foreign IP addresses detected.',
        'status': 'active',
    },
    {
        'ref': 'theft',
        'victim': 'mitchell',
        'case_type': 'Data Theft',
        'incident_date': date(2025, 12, 2),
        'summary': 'Device theft with potential data breach. Device contained unencrypted '
                   'business documents.',
        'status': 'pending',
    },
]

DEMO_EVIDENCE = [
    {
        'case': 'email',
        'evidence_type': 'Email Logs',
        'storage_location': 'Server-A/Evidence/2025/Case-001',
        'integrity_hash': 'a3f5e7d9c2b4f8e1a6d3c9b7f5e2a8d4',
        'collected_at': datetime(2025, 12, 1, 12, 0),
    },
    {
        'case': 'email',
        'evidence_type': 'Network Traffic',
        'storage_location': 'Server-A/Evidence/2025/Case-001',
        'integrity_hash': 'b8e2f4a6c9d1e5f7a3b6d8c4e9f2a7b5',
        'collected_at': datetime(2025, 12, 1, 13, 30),
    },
]

DEMO_ACTIONS = [
    {
        'case': 'email',
        'stage': ForensicStage.IDENTIFICATION,
        'description': 'Identified compromised email account and mapped unauthorized access points.',
        'executed_at': datetime(2025, 12, 1, 11, 30),
        'person_in_charge': 'Dr. Emily Carter',
        'status': ActionStatus.COMPLETED,
    },
    {
        'case': 'email',
        'stage': ForensicStage.COLLECTION,
        'description': 'Collected email server logs and network traffic data for analysis.',
        'executed_at': datetime(2025, 12, 1, 14, 0),
        'person_in_charge': 'Dr. Emily Carter',
        'status': ActionStatus.COMPLETED,
    },
    {
        'case': 'theft',
        'stage': ForensicStage.IDENTIFICATION,
        'description': 'Device identification and initial assessment of data exposure risk.',
        'executed_at': datetime(2025, 12, 3, 16, 0),
        'person_in_charge': 'Michael Roberts',
        'status': ActionStatus.PENDING,
    },
]


def seed_demo_data(store):
    """
    Create the demo records through ``store`` (which must allow create).

    Returns:
        dict: number of records created per kind
    """
    victim_ids = {}
    for record in DEMO_VICTIMS:
        values = {k: v for k, v in record.items() if k != 'ref'}
        victim_ids[record['ref']] = store.create(EntityKind.VICTIM, values).id

    case_ids = {}
    for record in DEMO_CASES:
        values = {k: v for k, v in record.items() if k not in ('ref', 'victim')}
        values['victim_id'] = victim_ids[record['victim']]
        case_ids[record['ref']] = store.create(EntityKind.CASE, values).id

    for record in DEMO_EVIDENCE:
        values = {k: v for k, v in record.items() if k != 'case'}
        values['case_id'] = case_ids[record['case']]
        store.create(EntityKind.EVIDENCE, values)

    for record in DEMO_ACTIONS:
        values = {k: v for k, v in record.items() if k != 'case'}
        values['case_id'] = case_ids[record['case']]
        store.create(EntityKind.ACTION, values)

    counts = store.snapshot.counts()
    logger.info(f'Seeded demo data: {counts}')
    return counts

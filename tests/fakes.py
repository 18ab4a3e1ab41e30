"""
In-memory stand-ins for the repository ports, used by service unit tests.
"""

import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from billing.ports.payment_repository import PaymentRepository
from billing.ports.processed_event_repository import ProcessedEventRepository
from contacts.ports.contact_repository import ContactRepository
from core.domain.events import EventBus
from core.domain.value_objects import LicenseType
from core.infrastructure.cache import CachePort
from licenses.domain.license import License, LicenseFull
from licenses.ports.license_repository import LicenseRepository
from tasks.ports.task_repository import TaskRepository


class RecordingEventBus(EventBus):
    """Keeps published events in ``events``."""

    def __init__(self):
        self.events = []

    async def publish(self, event) -> None:
        self.events.append(event)

    def subscribe(self, event_type, handler) -> None:
        pass

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


class InMemoryCache(CachePort):
    def __init__(self):
        self.store = {}
        self.versions = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, timeout=None):
        self.store[key] = value

    async def namespace_version(self, namespace):
        return self.versions.get(namespace, 1)

    async def bump_namespace(self, namespace):
        self.versions[namespace] = self.versions.get(namespace, 1) + 1
        return self.versions[namespace]


class InMemoryLicenseRepository(LicenseRepository):
    """License store; ``full`` holds the joined views returned by ``find_full_by_id``."""

    def __init__(self, *licenses: License):
        self.licenses: Dict = {license.id: license for license in licenses}
        self.full: Dict = {}

    async def save(self, license):
        self.licenses[license.id] = license
        return license

    async def apply_payment_event(self, license_id, occurred_at, **changes):
        before = self.licenses.get(license_id)
        if before is None:
            return None
        after = await self.save(before.apply_payment_event(occurred_at, **changes))
        return before, after

    async def find_by_id(self, license_id):
        return self.licenses.get(license_id)

    async def find_full_by_id(self, license_id) -> Optional[LicenseFull]:
        return self.full.get(license_id)

    async def find_full(self, filters, today):
        return list(self.full.values())

    async def find_by_subscription_id(self, subscription_id):
        return next(
            (item for item in self.licenses.values() if item.stripe_subscription_id == subscription_id),
            None,
        )

    async def find_lapsed_subscriptions(self, today):
        return [
            item
            for item in self.licenses.values()
            if item.type.value == "suscripcion" and item.status.value == "activa" and item.is_expired(today)
        ]

    async def delete(self, license_id):
        return self.licenses.pop(license_id, None) is not None

    async def count_by_status(self):
        counts: Dict[str, int] = {}
        for item in self.licenses.values():
            counts[item.status.value] = counts.get(item.status.value, 0) + 1
        return counts

    async def count_expired(self, today):
        return sum(1 for item in self.licenses.values() if item.is_expired(today))


class InMemoryPaymentRepository(PaymentRepository):
    def __init__(self):
        self.payments: Dict[str, object] = {}
        self.totals: Dict[date, Tuple[Decimal, int]] = {}

    async def record(self, payment):
        existing = self.payments.get(payment.stripe_reference)
        if existing is not None:
            return existing, False
        self.payments[payment.stripe_reference] = payment
        return payment, True

    async def list_for_license(self, license_id):
        return [payment for payment in self.payments.values() if payment.license_id == license_id]

    async def daily_totals(self, start, end):
        return {day: value for day, value in self.totals.items() if start <= day <= end}


class InMemoryProcessedEventRepository(ProcessedEventRepository):
    def __init__(self):
        self.outcomes: Dict[str, str] = {}

    async def claim(self, event_id, event_type):
        if event_id in self.outcomes:
            return False
        self.outcomes[event_id] = "processing"
        return True

    async def mark(self, event_id, outcome):
        self.outcomes[event_id] = outcome

    async def release(self, event_id):
        self.outcomes.pop(event_id, None)


class InMemoryContactRepository(ContactRepository):
    def __init__(self):
        self.contacts: Dict = {}

    async def save(self, contact):
        self.contacts[contact.id] = contact
        return contact

    async def save_many(self, contacts):
        for contact in contacts:
            self.contacts[contact.id] = contact
        return list(contacts)

    async def find_by_id(self, contact_id):
        return self.contacts.get(contact_id)

    async def find_page(self, filters):
        rows = sorted(self.contacts.values(), key=lambda contact: contact.created_at, reverse=True)
        start = (filters.page - 1) * filters.per_page
        return rows[start:start + filters.per_page], len(rows)

    async def search(self, query, limit):
        term = query.lower()
        matches = [
            contact
            for contact in self.contacts.values()
            if term in contact.full_name.lower() or term in (contact.email or "")
        ]
        return matches[:limit]

    async def list_all(self):
        return list(self.contacts.values())

    async def email_exists(self, email, exclude_id=None):
        return any(
            contact.email == email.lower() and contact.id != exclude_id for contact in self.contacts.values()
        )

    async def delete(self, contact_id):
        return self.contacts.pop(contact_id, None) is not None

    async def stats_for_user(self, user_id, month_start):
        raise NotImplementedError

    async def count(self):
        return len(self.contacts)


class InMemoryTaskRepository(TaskRepository):
    def __init__(self):
        self.tasks: Dict = {}

    async def save(self, task):
        self.tasks[task.id] = task
        return task

    async def find_by_id(self, task_id):
        return self.tasks.get(task_id)

    async def find_detail_by_id(self, task_id):
        raise NotImplementedError

    async def find(self, filters) -> List:
        raise NotImplementedError

    async def delete(self, task_id):
        return self.tasks.pop(task_id, None) is not None

    async def stats_for_user(self, user_id, now):
        raise NotImplementedError


def with_subscription(license: License, subscription_id: str) -> License:
    return replace(license, stripe_subscription_id=subscription_id)


def make_license(**overrides) -> License:
    values = {
        "client_id": uuid.uuid4(),
        "product_id": uuid.uuid4(),
        "license_type": LicenseType.SUBSCRIPTION,
        "start_date": date(2024, 1, 1),
    }
    values.update(overrides)
    return License.create(**values)

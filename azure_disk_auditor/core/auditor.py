"""Main orchestrator for the tenant-wide disk audit"""

import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Callable, Dict, List, Any, Optional

from .collector import SubscriptionCollector
from .models import (
    AuditConfiguration,
    AuditResult,
    DiskRecord,
    SubscriptionInfo,
)
from ..auth.manager import AuthenticationManager
from ..utils.logger import setup_logger


class RecordCollector:
    """Append-only, lock-guarded sink shared by subscription workers"""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[DiskRecord] = []
        self._warnings: List[str] = []

    def extend(self, records: List[DiskRecord], warnings: Optional[List[str]] = None) -> None:
        with self._lock:
            self._records.extend(records)
            self._warnings.extend(warnings or [])

    @property
    def records(self) -> List[DiskRecord]:
        with self._lock:
            return list(self._records)

    @property
    def warnings(self) -> List[str]:
        with self._lock:
            return list(self._warnings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class DiskAuditor:
    """Runs the disk audit across every subscription of a tenant"""

    def __init__(
        self,
        config: AuditConfiguration,
        auth_manager: Optional[AuthenticationManager] = None
    ):
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)
        self.auth_manager = auth_manager or AuthenticationManager(config.tenant_id)

    def run(self, on_subscription_done: Optional[Callable[[SubscriptionInfo], None]] = None) -> AuditResult:
        """Authenticate, collect every subscription and return the combined result.

        Any failure while collecting a subscription propagates: the run is
        aborted and no partial result is returned.
        """

        audit_id = str(uuid.uuid4())
        start_time = time.time()
        self.logger.info(f"Starting disk audit {audit_id} for tenant {self.config.tenant_id}")

        self.auth_manager.authenticate()
        subscriptions = self.auth_manager.get_subscriptions(
            include_disabled=self.config.include_disabled_subscriptions
        )

        collector = RecordCollector()
        if subscriptions:
            self._collect_subscriptions(subscriptions, collector, on_subscription_done)
        else:
            self.logger.warning(f"No subscriptions found in tenant {self.config.tenant_id}")

        records = collector.records
        result = AuditResult(
            audit_id=audit_id,
            timestamp=datetime.now(timezone.utc),
            tenant_id=self.config.tenant_id,
            records=records,
            subscriptions=subscriptions,
            duration_seconds=time.time() - start_time,
            warnings=collector.warnings,
            statistics=generate_statistics(records),
        )

        self.logger.info(
            f"Audit {audit_id} completed: {len(records)} disks across "
            f"{len(subscriptions)} subscriptions in {result.duration_seconds:.1f}s"
        )
        return result

    def _collect_subscriptions(
        self,
        subscriptions: List[SubscriptionInfo],
        collector: RecordCollector,
        on_subscription_done: Optional[Callable[[SubscriptionInfo], None]]
    ) -> None:
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_subscription = {
                executor.submit(self._collect_subscription, sub, collector): sub
                for sub in subscriptions
            }

            for future in as_completed(future_to_subscription):
                sub = future_to_subscription[future]
                try:
                    future.result()
                except Exception as e:
                    self.logger.error(f"Error collecting subscription {sub.name} ({sub.id}): {e}")
                    for pending in future_to_subscription:
                        pending.cancel()
                    raise
                if on_subscription_done:
                    on_subscription_done(sub)

    def _collect_subscription(self, subscription: SubscriptionInfo, collector: RecordCollector) -> None:
        clients = self.auth_manager.get_clients_for_subscription(subscription.id)
        records, warnings = SubscriptionCollector(
            subscription, self.config.tenant_id, clients
        ).collect()
        collector.extend(records, warnings)


def generate_statistics(records: List[DiskRecord]) -> Dict[str, Any]:
    """Counts by compute type, migration status and priority"""

    stats = {
        'total_disks': len(records),
        'total_size_gb': 0,
        'by_compute_type': {},
        'by_migration_status': {},
        'by_migration_priority': {},
    }

    for record in records:
        stats['total_size_gb'] += record.size_gb or 0

        compute_type = record.compute_type.value
        stats['by_compute_type'][compute_type] = stats['by_compute_type'].get(compute_type, 0) + 1

        status = record.migration_status.value
        stats['by_migration_status'][status] = stats['by_migration_status'].get(status, 0) + 1

        priority = record.migration_priority.value
        stats['by_migration_priority'][priority] = stats['by_migration_priority'].get(priority, 0) + 1

    return stats

"""Per-subscription collection of VM, VMSS and managed disk records"""

from typing import Dict, List, Any, Tuple

from .classifier import DiskClassifier, enum_value, resource_group_from_id
from .models import (
    ComputeType,
    DiskRole,
    DiskRecord,
    SubscriptionInfo,
)
from ..utils.logger import setup_logger


class SubscriptionCollector:
    """Collects and classifies every disk of a single subscription"""

    def __init__(self, subscription: SubscriptionInfo, tenant_id: str, clients: Dict[str, Any]):
        self.logger = setup_logger(self.__class__.__name__)
        self.subscription = subscription
        self.tenant_id = tenant_id
        self.compute_client = clients['compute']
        self.storage_client = clients['storage']

    def collect(self) -> Tuple[List[DiskRecord], List[str]]:
        """Return the subscription's disk records and any degradation warnings"""

        sub = self.subscription
        self.logger.info(f"Collecting disks for subscription: {sub.name} ({sub.id})")

        vms = list(self.compute_client.virtual_machines.list_all())
        scale_sets = list(self.compute_client.virtual_machine_scale_sets.list_all())
        disks = list(self.compute_client.disks.list())

        classifier = DiskClassifier(
            self._build_disk_lookup(disks),
            self._build_storage_account_lookup,
        )

        records: List[DiskRecord] = []
        for vm in vms:
            records.extend(self._vm_records(vm, classifier))

        for scale_set in scale_sets:
            records.extend(self._scale_set_records(scale_set, classifier))

        orphans = [disk for disk in disks if not classifier.is_referenced(disk)]
        for disk in orphans:
            records.append(self._orphan_record(disk, classifier))

        self.logger.info(
            f"Completed subscription {sub.name}: {len(vms)} VMs, {len(scale_sets)} scale sets, "
            f"{len(disks)} managed disks ({len(orphans)} unattached), {len(records)} records"
        )
        return records, classifier.warnings

    def _build_disk_lookup(self, disks: List[Any]) -> Dict[str, Any]:
        return {disk.id.lower(): disk for disk in disks}

    def _build_storage_account_lookup(self) -> Dict[str, str]:
        """Listed only once an unmanaged reference needs it"""
        lookup = {}
        for account in self.storage_client.storage_accounts.list():
            sku_name = enum_value(account.sku.name) if account.sku is not None else ""
            lookup[account.name.lower()] = sku_name
        return lookup

    def _vm_records(self, vm: Any, classifier: DiskClassifier) -> List[DiskRecord]:
        return self._compute_records(
            classifier,
            storage_profile=vm.storage_profile,
            compute_type=ComputeType.VM,
            compute_name=vm.name,
            resource_group=resource_group_from_id(vm.id),
            location=vm.location,
        )

    def _scale_set_records(self, scale_set: Any, classifier: DiskClassifier) -> List[DiskRecord]:
        resource_group = resource_group_from_id(scale_set.id)
        instances = self.compute_client.virtual_machine_scale_set_vms.list(resource_group, scale_set.name)

        records = []
        for instance in instances:
            records.extend(self._compute_records(
                classifier,
                storage_profile=instance.storage_profile,
                compute_type=ComputeType.VMSS,
                compute_name=scale_set.name,
                resource_group=resource_group,
                location=instance.location or scale_set.location,
                instance_id=instance.instance_id or "",
            ))
        return records

    def _compute_records(
        self,
        classifier: DiskClassifier,
        storage_profile: Any,
        compute_type: ComputeType,
        compute_name: str,
        resource_group: str,
        location: str,
        instance_id: str = ""
    ) -> List[DiskRecord]:
        """OS disk first, then data disks in listing order"""

        if storage_profile is None:
            return []

        owner = f"{compute_type.value} {compute_name}"
        if instance_id:
            owner += f" instance {instance_id}"

        references: List[Tuple[DiskRole, Any]] = []
        if storage_profile.os_disk is not None:
            references.append((DiskRole.OS, storage_profile.os_disk))
        for data_disk in storage_profile.data_disks or []:
            references.append((DiskRole.DATA, data_disk))

        records = []
        for role, disk_ref in references:
            classified = classifier.classify_reference(disk_ref, owner)
            if classified is None:
                continue
            backing, disk_name, size_gb = classified
            records.append(DiskRecord(
                tenant_id=self.tenant_id,
                subscription_name=self.subscription.name,
                subscription_id=self.subscription.id,
                resource_group=resource_group,
                compute_type=compute_type,
                compute_name=compute_name,
                instance_id=instance_id,
                location=location,
                disk_role=role,
                disk_name=disk_name,
                size_gb=size_gb,
                backing=backing,
            ))
        return records

    def _orphan_record(self, disk: Any, classifier: DiskClassifier) -> DiskRecord:
        return DiskRecord(
            tenant_id=self.tenant_id,
            subscription_name=self.subscription.name,
            subscription_id=self.subscription.id,
            resource_group=resource_group_from_id(disk.id),
            compute_type=ComputeType.NONE,
            compute_name="",
            location=disk.location,
            disk_role=classifier.orphan_role(disk),
            disk_name=disk.name,
            size_gb=disk.disk_size_gb,
            backing=classifier.managed_backing(disk),
        )

"""Core data models for the Azure Disk Auditor"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Any, Optional, Union


class ComputeType(Enum):
    """Kind of compute resource a disk is attached to"""
    VM = "VM"
    VMSS = "VMSS"
    NONE = "None"


class DiskRole(Enum):
    """Role of a disk on its compute resource"""
    OS = "OS"
    DATA = "Data"


class AttachmentType(Enum):
    """Whether a disk was reached from a compute resource"""
    ATTACHED = "Attached"
    UNATTACHED = "Unattached"


class MigrationStatus(Enum):
    """Managed-disk migration status"""
    MANAGED = "Managed"
    UNMANAGED = "Unmanaged - Needs Migration"


class MigrationPriority(Enum):
    """Triage label for moving disks off unmanaged storage"""
    HIGH = "High - VMSS Unmanaged"
    MEDIUM = "Medium - VM Unmanaged"
    NONE = "None"


UNKNOWN = "Unknown"
UNMANAGED_SKU = "Unmanaged"
STORAGE_SERVICE_ENCRYPTION = "StorageServiceEncryption"


@dataclass(frozen=True)
class ManagedBacking:
    """Disk backed by a managed disk resource"""
    disk_id: str
    sku: str = UNKNOWN
    tier: str = UNKNOWN
    encryption_type: str = UNKNOWN


@dataclass(frozen=True)
class UnmanagedBacking:
    """Disk backed by a VHD blob in a storage account"""
    vhd_uri: str = ""
    storage_account: str = ""
    tier: str = UNKNOWN

    @property
    def encryption_type(self) -> str:
        return STORAGE_SERVICE_ENCRYPTION if self.tier != UNKNOWN else UNKNOWN


DiskBacking = Union[ManagedBacking, UnmanagedBacking]


def migration_priority(compute_type: ComputeType, managed: bool) -> MigrationPriority:
    """Priority label for a disk given its owner and backing"""
    if managed or compute_type is ComputeType.NONE:
        return MigrationPriority.NONE
    if compute_type is ComputeType.VMSS:
        return MigrationPriority.HIGH
    return MigrationPriority.MEDIUM


@dataclass(frozen=True)
class DiskRecord:
    """One audited disk, flattened for output"""
    tenant_id: str
    subscription_name: str
    subscription_id: str
    resource_group: str
    compute_type: ComputeType
    compute_name: str
    location: str
    disk_role: DiskRole
    disk_name: str
    size_gb: Optional[int]
    backing: DiskBacking
    instance_id: str = ""

    @property
    def is_managed(self) -> bool:
        return isinstance(self.backing, ManagedBacking)

    @property
    def attachment_type(self) -> AttachmentType:
        if self.compute_type is ComputeType.NONE:
            return AttachmentType.UNATTACHED
        return AttachmentType.ATTACHED

    @property
    def migration_status(self) -> MigrationStatus:
        return MigrationStatus.MANAGED if self.is_managed else MigrationStatus.UNMANAGED

    @property
    def migration_priority(self) -> MigrationPriority:
        return migration_priority(self.compute_type, self.is_managed)

    @property
    def tier(self) -> str:
        return self.backing.tier

    @property
    def sku(self) -> str:
        return self.backing.sku if self.is_managed else UNMANAGED_SKU

    @property
    def managed_disk_id(self) -> str:
        return self.backing.disk_id if self.is_managed else ""

    @property
    def vhd_uri(self) -> str:
        return "" if self.is_managed else self.backing.vhd_uri

    @property
    def storage_account(self) -> str:
        return "" if self.is_managed else self.backing.storage_account

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the output column layout"""
        return {
            'TenantId': self.tenant_id,
            'SubscriptionName': self.subscription_name,
            'SubscriptionId': self.subscription_id,
            'ResourceGroup': self.resource_group,
            'ComputeType': self.compute_type.value,
            'ComputeName': self.compute_name,
            'InstanceId': self.instance_id,
            'Location': self.location,
            'DiskType': self.disk_role.value,
            'DiskName': self.disk_name,
            'DiskSizeGB': self.size_gb if self.size_gb is not None else "",
            'DiskTier': self.tier,
            'SKU': self.sku,
            'EncryptionType': self.backing.encryption_type,
            'ManagedDiskId': self.managed_disk_id,
            'VhdUri': self.vhd_uri,
            'StorageAccount': self.storage_account,
            'AttachmentType': self.attachment_type.value,
            'MigrationStatus': self.migration_status.value,
            'MigrationPriority': self.migration_priority.value,
        }


DISK_RECORD_COLUMNS = [
    'TenantId', 'SubscriptionName', 'SubscriptionId', 'ResourceGroup',
    'ComputeType', 'ComputeName', 'InstanceId', 'Location', 'DiskType',
    'DiskName', 'DiskSizeGB', 'DiskTier', 'SKU', 'EncryptionType',
    'ManagedDiskId', 'VhdUri', 'StorageAccount', 'AttachmentType',
    'MigrationStatus', 'MigrationPriority',
]


@dataclass
class SubscriptionInfo:
    """Subscription visible to the authenticated principal"""
    id: str
    name: str = ""
    tenant_id: str = ""
    state: str = "Enabled"


@dataclass
class AuditConfiguration:
    """Configuration for a disk audit run"""
    tenant_id: str = ""
    max_workers: int = 5
    csv_path: str = "Tenant-Full-Compute-Disk-Audit.csv"
    excel_path: str = "Tenant-Disk-Summary.xlsx"
    include_disabled_subscriptions: bool = False


@dataclass
class AuditResult:
    """Results from a disk audit run"""
    audit_id: str
    timestamp: datetime
    tenant_id: str
    records: List[DiskRecord] = field(default_factory=list)
    subscriptions: List[SubscriptionInfo] = field(default_factory=list)
    duration_seconds: float = 0.0
    warnings: List[str] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)

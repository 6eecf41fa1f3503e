"""Disk classification rules: backing storage, tier and migration labels"""

from typing import Callable, Dict, List, Any, Optional, Tuple, Union
from urllib.parse import urlparse

from azure.core.exceptions import HttpResponseError

from .models import (
    DiskRole,
    DiskBacking,
    ManagedBacking,
    UnmanagedBacking,
    UNKNOWN,
)
from ..utils.logger import setup_logger


def enum_value(value: Any) -> str:
    """Plain string for an SDK enum member or string"""
    if value is None:
        return ""
    return str(getattr(value, 'value', value))


def storage_account_from_vhd_uri(vhd_uri: Optional[str]) -> Optional[str]:
    """Storage account name is the first DNS label of the blob host"""
    if not vhd_uri:
        return None
    host = urlparse(vhd_uri).hostname
    if not host:
        return None
    return host.split('.')[0]


def resource_group_from_id(resource_id: Optional[str]) -> str:
    """Extract the resource group segment of an ARM resource id"""
    if not resource_id:
        return ""
    parts = resource_id.split('/')
    for idx, part in enumerate(parts[:-1]):
        if part.lower() == 'resourcegroups':
            return parts[idx + 1]
    return ""


def tier_from_sku_name(sku_name: str) -> str:
    """Premium_LRS -> Premium, StandardSSD_ZRS -> StandardSSD"""
    if not sku_name:
        return UNKNOWN
    return sku_name.split('_')[0]


class DiskClassifier:
    """Resolves disk references against one subscription's lookups.

    ``disk_lookup`` maps lower-cased managed disk ids to disk objects and
    ``storage_account_skus`` maps lower-cased storage account names to SKU
    names. The storage map may be given as a zero-argument loader, which is
    called on the first unmanaged reference only. Lookup misses never fail a
    record: they degrade to ``Unknown`` and are recorded in ``warnings``.
    """

    def __init__(
        self,
        disk_lookup: Dict[str, Any],
        storage_account_skus: Union[Dict[str, str], Callable[[], Dict[str, str]]]
    ):
        self.logger = setup_logger(self.__class__.__name__)
        self.disk_lookup = disk_lookup
        self._storage_account_skus = storage_account_skus
        self.warnings: List[str] = []
        self.referenced_disk_ids = set()

    @property
    def storage_account_skus(self) -> Dict[str, str]:
        if callable(self._storage_account_skus):
            loader = self._storage_account_skus
            try:
                self._storage_account_skus = loader()
            except HttpResponseError as e:
                self._storage_account_skus = {}
                self._warn(f"Storage accounts could not be listed, unmanaged disk tiers unknown: {e.message}")
        return self._storage_account_skus

    def classify_reference(
        self,
        disk_ref: Any,
        owner: str
    ) -> Optional[Tuple[DiskBacking, str, Optional[int]]]:
        """Resolve a VM/VMSS disk reference to (backing, disk name, size in GB).

        Returns None for a shared managed disk already reached from another
        owner, so each managed disk yields a single record.
        """

        managed_ref = getattr(disk_ref, 'managed_disk', None)
        if managed_ref is not None and managed_ref.id:
            return self._classify_managed_reference(disk_ref, managed_ref, owner)

        return self._classify_unmanaged_reference(disk_ref, owner)

    def _classify_managed_reference(self, disk_ref: Any, managed_ref: Any, owner: str):
        disk_key = managed_ref.id.lower()
        if disk_key in self.referenced_disk_ids:
            self.logger.debug(f"{owner}: shared disk {disk_ref.name} already recorded, skipping")
            return None
        self.referenced_disk_ids.add(disk_key)
        disk = self.disk_lookup.get(disk_key)

        if disk is None:
            self.logger.debug(f"Managed disk {managed_ref.id} not in listing, using reference data")
            sku_name = enum_value(getattr(managed_ref, 'storage_account_type', None)) or UNKNOWN
            backing = ManagedBacking(
                disk_id=managed_ref.id,
                sku=sku_name,
                tier=tier_from_sku_name(sku_name) if sku_name != UNKNOWN else UNKNOWN,
            )
            return backing, disk_ref.name, disk_ref.disk_size_gb

        return self.managed_backing(disk), disk.name, disk.disk_size_gb

    def _classify_unmanaged_reference(self, disk_ref: Any, owner: str):
        vhd = getattr(disk_ref, 'vhd', None)
        vhd_uri = vhd.uri if vhd is not None and vhd.uri else ""
        account_name = storage_account_from_vhd_uri(vhd_uri)

        tier = UNKNOWN
        if account_name is None:
            self._warn(f"{owner}: unmanaged disk {disk_ref.name} has no VHD URI, tier unknown")
        else:
            sku_name = self.storage_account_skus.get(account_name.lower())
            if sku_name:
                tier = sku_name
            else:
                self._warn(
                    f"{owner}: storage account {account_name} for disk {disk_ref.name} "
                    f"could not be resolved, tier unknown"
                )

        backing = UnmanagedBacking(
            vhd_uri=vhd_uri,
            storage_account=account_name or "",
            tier=tier,
        )
        return backing, disk_ref.name, disk_ref.disk_size_gb

    def managed_backing(self, disk: Any) -> ManagedBacking:
        """Backing details taken from a managed disk object"""
        sku = getattr(disk, 'sku', None)
        sku_name = enum_value(sku.name) if sku is not None else ""
        sku_tier = sku.tier if sku is not None else None
        encryption = getattr(disk, 'encryption', None)
        encryption_type = enum_value(encryption.type) if encryption is not None else ""

        return ManagedBacking(
            disk_id=disk.id,
            sku=sku_name or UNKNOWN,
            tier=sku_tier or tier_from_sku_name(sku_name),
            encryption_type=encryption_type or UNKNOWN,
        )

    def orphan_role(self, disk: Any) -> DiskRole:
        """OS if the disk carries an OS type marker, else Data"""
        return DiskRole.OS if getattr(disk, 'os_type', None) else DiskRole.DATA

    def is_referenced(self, disk: Any) -> bool:
        return disk.id.lower() in self.referenced_disk_ids

    def _warn(self, message: str) -> None:
        self.logger.warning(message)
        self.warnings.append(message)

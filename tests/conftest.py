"""Shared fixtures for the disk auditor tests"""

import pytest

from azure_disk_auditor.core.models import SubscriptionInfo

from .fakes import (
    SUBSCRIPTION_ID,
    TENANT_ID,
    make_clients,
    make_disk,
    make_storage_account,
    make_vm,
    managed_ref,
    unmanaged_ref,
)


@pytest.fixture
def subscription():
    return SubscriptionInfo(id=SUBSCRIPTION_ID, name="Production", tenant_id=TENANT_ID)


@pytest.fixture
def single_vm_clients():
    """One VM: managed Premium_LRS OS disk plus an unmanaged data disk in sadata01"""
    os_disk = make_disk("vm01-osdisk", sku="Premium_LRS", tier="Premium", size_gb=128, os_type="Linux")
    vm = make_vm(
        "vm01",
        os_disk=managed_ref(os_disk),
        data_disks=[unmanaged_ref("vm01-data0", "https://sadata01.blob.core.windows.net/vhds/vm01-data0.vhd")],
    )
    return make_clients(
        vms=[vm],
        disks=[os_disk],
        storage_accounts=[make_storage_account("sadata01", "Standard_GRS")],
    )

"""Tests for disk reference resolution"""

from types import SimpleNamespace

import pytest

from azure_disk_auditor.core.classifier import (
    DiskClassifier,
    enum_value,
    resource_group_from_id,
    storage_account_from_vhd_uri,
    tier_from_sku_name,
)
from azure_disk_auditor.core.models import DiskRole, ManagedBacking, UnmanagedBacking

from .fakes import make_disk, managed_ref, unmanaged_ref


class TestHelpers:

    @pytest.mark.parametrize("uri, expected", [
        ("https://sadata01.blob.core.windows.net/vhds/disk.vhd", "sadata01"),
        ("https://SALegacy.blob.core.usgovcloudapi.net/vhds/os.vhd", "salegacy"),
        ("", None),
        (None, None),
        ("not-a-uri", None),
    ])
    def test_storage_account_from_vhd_uri(self, uri, expected):
        assert storage_account_from_vhd_uri(uri) == expected

    def test_resource_group_from_id(self):
        resource_id = "/subscriptions/abc/resourceGroups/RG-Prod/providers/Microsoft.Compute/disks/d1"
        assert resource_group_from_id(resource_id) == "RG-Prod"

    def test_resource_group_from_id_lower_case_segment(self):
        assert resource_group_from_id("/subscriptions/abc/resourcegroups/rg1/providers/x/y/z") == "rg1"

    def test_resource_group_from_empty_id(self):
        assert resource_group_from_id(None) == ""

    def test_tier_from_sku_name(self):
        assert tier_from_sku_name("StandardSSD_ZRS") == "StandardSSD"
        assert tier_from_sku_name("") == "Unknown"

    def test_enum_value(self):
        assert enum_value(SimpleNamespace(value="Premium_LRS")) == "Premium_LRS"
        assert enum_value("Standard_LRS") == "Standard_LRS"
        assert enum_value(None) == ""


class TestDiskClassifier:

    def test_managed_reference_uses_lookup(self):
        disk = make_disk("os1", sku="Premium_LRS", tier="Premium", size_gb=128)
        classifier = DiskClassifier({disk.id.lower(): disk}, {})

        backing, name, size = classifier.classify_reference(managed_ref(disk), "VM vm01")

        assert isinstance(backing, ManagedBacking)
        assert backing.sku == "Premium_LRS"
        assert backing.tier == "Premium"
        assert backing.encryption_type == "EncryptionAtRestWithPlatformKey"
        assert (name, size) == ("os1", 128)
        assert classifier.is_referenced(disk)

    def test_managed_reference_lookup_ignores_case(self):
        disk = make_disk("os1")
        classifier = DiskClassifier({disk.id.lower(): disk}, {})

        classifier.classify_reference(managed_ref(disk, upper_case_id=True), "VM vm01")

        assert classifier.is_referenced(disk)

    def test_managed_reference_missing_from_lookup(self):
        disk = make_disk("elsewhere", sku="StandardSSD_LRS", size_gb=32)
        classifier = DiskClassifier({}, {})

        backing, name, size = classifier.classify_reference(managed_ref(disk), "VM vm01")

        assert isinstance(backing, ManagedBacking)
        assert backing.sku == "StandardSSD_LRS"
        assert backing.tier == "StandardSSD"
        assert backing.encryption_type == "Unknown"
        assert size == 32

    def test_unmanaged_reference_resolves_storage_account(self):
        classifier = DiskClassifier({}, {"sadata01": "Standard_GRS"})
        ref = unmanaged_ref("data0", "https://SAdata01.blob.core.windows.net/vhds/data0.vhd", size_gb=256)

        backing, name, size = classifier.classify_reference(ref, "VM vm01")

        assert isinstance(backing, UnmanagedBacking)
        assert backing.storage_account == "sadata01"
        assert backing.tier == "Standard_GRS"
        assert (name, size) == ("data0", 256)
        assert classifier.warnings == []

    def test_unknown_storage_account_degrades_with_warning(self):
        classifier = DiskClassifier({}, {})
        ref = unmanaged_ref("data0", "https://gone01.blob.core.windows.net/vhds/data0.vhd")

        backing, _, _ = classifier.classify_reference(ref, "VM vm01")

        assert backing.tier == "Unknown"
        assert backing.storage_account == "gone01"
        assert len(classifier.warnings) == 1
        assert "gone01" in classifier.warnings[0]

    def test_missing_vhd_uri_degrades_with_warning(self):
        classifier = DiskClassifier({}, {"sadata01": "Standard_LRS"})

        backing, _, _ = classifier.classify_reference(unmanaged_ref("os", None), "VMSS ss instance 0")

        assert isinstance(backing, UnmanagedBacking)
        assert backing.tier == "Unknown"
        assert backing.vhd_uri == ""
        assert backing.storage_account == ""
        assert "VMSS ss instance 0" in classifier.warnings[0]

    def test_orphan_role(self):
        classifier = DiskClassifier({}, {})
        assert classifier.orphan_role(make_disk("a", os_type="Windows")) is DiskRole.OS
        assert classifier.orphan_role(make_disk("b")) is DiskRole.DATA

    def test_managed_backing_without_sku(self):
        disk = make_disk("nosku")
        disk.sku = None
        disk.encryption = None

        backing = DiskClassifier({}, {}).managed_backing(disk)

        assert backing.sku == "Unknown"
        assert backing.tier == "Unknown"
        assert backing.encryption_type == "Unknown"

    def test_storage_loader_runs_on_first_unmanaged_reference(self):
        calls = []
        classifier = DiskClassifier({}, lambda: calls.append(1) or {"sadata01": "Standard_LRS"})
        disk = make_disk("os1")
        classifier.classify_reference(managed_ref(disk), "VM vm01")
        assert calls == []

        ref = unmanaged_ref("data0", "https://sadata01.blob.core.windows.net/vhds/data0.vhd")
        classifier.classify_reference(ref, "VM vm01")
        classifier.classify_reference(ref, "VM vm02")

        assert calls == [1]
        assert classifier.warnings == []

    def test_repeated_managed_reference_is_skipped(self):
        disk = make_disk("shared")
        classifier = DiskClassifier({disk.id.lower(): disk}, {})

        assert classifier.classify_reference(managed_ref(disk), "VM vm01") is not None
        assert classifier.classify_reference(managed_ref(disk, upper_case_id=True), "VM vm02") is None
        assert classifier.is_referenced(disk)

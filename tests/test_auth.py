"""Tests for tenant-scoped authentication and subscription enumeration"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import ClientAuthenticationError

from azure_disk_auditor.auth import manager as auth_module
from azure_disk_auditor.auth.manager import AuthenticationManager

from .fakes import TENANT_ID


def _subscription(sub_id, name, state="Enabled", tenant_id=TENANT_ID):
    return SimpleNamespace(subscription_id=sub_id, display_name=name, state=state, tenant_id=tenant_id)


@pytest.fixture
def subscription_client(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(auth_module, "SubscriptionClient", MagicMock(return_value=client))
    monkeypatch.delenv("AZURE_TENANT_ID", raising=False)
    return client


def test_empty_tenant_is_rejected():
    with pytest.raises(ValueError):
        AuthenticationManager("  ")


def test_authenticates_with_cli_for_tenant(subscription_client):
    subscription_client.subscriptions.list.return_value = iter([])

    with patch.object(auth_module, "AzureCliCredential") as cli_credential:
        manager = AuthenticationManager(TENANT_ID)
        credential = manager.authenticate()

    cli_credential.assert_called_once_with(tenant_id=TENANT_ID)
    assert credential is cli_credential.return_value


def test_authentication_failure_raises(subscription_client):
    subscription_client.subscriptions.list.side_effect = RuntimeError("token expired")

    with patch.object(auth_module, "AzureCliCredential"), \
            patch.object(auth_module, "DefaultAzureCredential"):
        manager = AuthenticationManager(TENANT_ID)
        with pytest.raises(ClientAuthenticationError):
            manager.authenticate()

    assert manager.credential is None


def test_subscriptions_are_filtered_by_tenant_and_state(subscription_client):
    subscription_client.subscriptions.list.side_effect = lambda: iter([
        _subscription("a", "Prod"),
        _subscription("b", "Old", state="Disabled"),
        _subscription("c", "Other tenant", tenant_id="someone-else"),
        _subscription("d", "Legacy API", tenant_id=None),
        _subscription("e", "Overdue", state="PastDue"),
        _subscription("f", "Near limit", state="Warned"),
        _subscription("g", "Removed", state="Deleted"),
    ])
    manager = AuthenticationManager(TENANT_ID)
    manager.credential = object()

    enabled = manager.get_subscriptions()
    everything = manager.get_subscriptions(include_disabled=True)

    assert [(s.id, s.name) for s in enabled] == [
        ("a", "Prod"), ("d", "Legacy API"), ("e", "Overdue"), ("f", "Near limit"),
    ]
    assert [s.id for s in everything] == ["a", "b", "d", "e", "f", "g"]
    assert all(s.tenant_id == TENANT_ID for s in everything)


def test_clients_are_cached_per_subscription(monkeypatch):
    monkeypatch.setattr(auth_module, "ComputeManagementClient", MagicMock())
    monkeypatch.setattr(auth_module, "StorageManagementClient", MagicMock())
    manager = AuthenticationManager(TENANT_ID)
    manager.credential = object()

    first = manager.get_clients_for_subscription("sub-1")
    second = manager.get_clients_for_subscription("sub-1")

    assert first is second
    assert set(first) == {"compute", "storage"}
    auth_module.ComputeManagementClient.assert_called_once_with(manager.credential, "sub-1")

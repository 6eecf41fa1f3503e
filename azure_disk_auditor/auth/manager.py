"""Authentication manager for Azure services"""

import os
import threading
from typing import Dict, List, Any

try:
    from azure.identity import (
        DefaultAzureCredential,
        AzureCliCredential,
        EnvironmentCredential
    )
    from azure.mgmt.compute import ComputeManagementClient
    from azure.mgmt.storage import StorageManagementClient
    from azure.mgmt.subscription import SubscriptionClient
    from azure.core.exceptions import ClientAuthenticationError
except ImportError as e:
    raise ImportError(f"Required Azure SDK packages not installed: {e}")

from ..core.models import SubscriptionInfo
from ..utils.logger import setup_logger

# Warned and PastDue subscriptions still hold running resources
INACTIVE_SUBSCRIPTION_STATES = {'Disabled', 'Deleted'}


class AuthenticationManager:
    """Manages tenant-scoped Azure authentication and client creation"""

    def __init__(self, tenant_id: str):
        if not tenant_id or not tenant_id.strip():
            raise ValueError("Tenant ID must be a non-empty string")

        self.logger = setup_logger(self.__class__.__name__)
        self.tenant_id = tenant_id.strip()
        self.credential = None
        self._subscription_cache: Dict[str, SubscriptionInfo] = {}
        self._client_cache: Dict[str, Dict[str, Any]] = {}
        self._client_lock = threading.Lock()

    def authenticate(self):
        """Authenticate against the tenant, trying each credential source in turn"""

        # Environment variables only count when they target the same tenant
        if (os.getenv('AZURE_TENANT_ID') == self.tenant_id and
                all(os.getenv(var) for var in ['AZURE_CLIENT_ID', 'AZURE_CLIENT_SECRET'])):
            try:
                self.credential = EnvironmentCredential()
                self._test_credential()
                self.logger.info("Authenticated using environment variables")
                return self.credential
            except Exception as e:
                self.logger.debug(f"Environment credential failed: {e}")

        try:
            self.credential = AzureCliCredential(tenant_id=self.tenant_id)
            self._test_credential()
            self.logger.info(f"Authenticated using Azure CLI for tenant {self.tenant_id}")
            return self.credential
        except Exception as e:
            self.logger.debug(f"Azure CLI authentication failed: {e}")

        try:
            self.credential = DefaultAzureCredential(additionally_allowed_tenants=[self.tenant_id])
            self._test_credential()
            self.logger.info("Authenticated using default credential chain")
            return self.credential
        except Exception as e:
            self.logger.error(f"Default authentication failed: {e}")

        self.credential = None
        raise ClientAuthenticationError(f"Unable to authenticate with Azure tenant {self.tenant_id}")

    def get_credential(self):
        """Get the current credential, authenticating if needed"""
        if not self.credential:
            self.authenticate()
        return self.credential

    def _test_credential(self):
        """Test the credential by listing subscriptions"""
        subscription_client = SubscriptionClient(self.credential)
        next(iter(subscription_client.subscriptions.list()), None)

    def get_subscriptions(self, include_disabled: bool = False) -> List[SubscriptionInfo]:
        """List subscriptions of the tenant visible to the authenticated principal"""

        subscription_client = SubscriptionClient(self.get_credential())

        subscriptions = []
        for sub in subscription_client.subscriptions.list():
            sub_tenant = getattr(sub, 'tenant_id', None)
            if sub_tenant and sub_tenant.lower() != self.tenant_id.lower():
                self.logger.debug(f"Skipping subscription {sub.display_name} from tenant {sub_tenant}")
                continue

            state = str(getattr(sub.state, 'value', sub.state) or "")
            if state in INACTIVE_SUBSCRIPTION_STATES and not include_disabled:
                self.logger.info(f"Skipping {state or 'unknown state'} subscription: {sub.display_name}")
                continue

            info = SubscriptionInfo(
                id=sub.subscription_id,
                name=sub.display_name or sub.subscription_id,
                tenant_id=sub_tenant or self.tenant_id,
                state=state,
            )
            subscriptions.append(info)
            self._subscription_cache[info.id] = info
            self.logger.debug(f"Found subscription: {info.name} ({info.id})")

        self.logger.info(f"Found {len(subscriptions)} subscriptions in tenant {self.tenant_id}")
        return subscriptions

    def get_clients_for_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Get Azure service clients for a subscription"""

        credential = self.get_credential()

        with self._client_lock:
            if subscription_id in self._client_cache:
                return self._client_cache[subscription_id]

            clients = {
                'compute': ComputeManagementClient(credential, subscription_id),
                'storage': StorageManagementClient(credential, subscription_id),
            }
            self._client_cache[subscription_id] = clients

        self.logger.debug(f"Created clients for subscription {subscription_id}")
        return clients

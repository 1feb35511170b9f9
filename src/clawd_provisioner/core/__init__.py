"""Core provisioning logic.

This subpackage contains the provisioning workflow and the local
filesystem and JSON document operations it performs.

Key modules:
    - workflow: Provisioner and provision_agent()
    - scaffold: Workspace tree, documents and shared files
    - gateway_config: In-memory gateway config mutations
    - json_store: Read-modify-write JSON documents
    - dashboard: Dashboard registry entries
    - steps: Step log
"""

from clawd_provisioner.core.workflow import Provisioner, provision_agent
from clawd_provisioner.core.scaffold import (
    write_if_missing,
    create_workspace_tree,
    write_documents,
    copy_shared_files,
)
from clawd_provisioner.core.gateway_config import (
    apply_provisioning,
    ConfigChanges,
)
from clawd_provisioner.core.json_store import JsonDocumentStore
from clawd_provisioner.core.dashboard import DashboardEntry, register_agent
from clawd_provisioner.core.steps import StepLog

__all__ = [
    # workflow
    "Provisioner",
    "provision_agent",
    # scaffold
    "write_if_missing",
    "create_workspace_tree",
    "write_documents",
    "copy_shared_files",
    # gateway_config
    "apply_provisioning",
    "ConfigChanges",
    # json_store
    "JsonDocumentStore",
    # dashboard
    "DashboardEntry",
    "register_agent",
    # steps
    "StepLog",
]

# Services package

from .dynamic_variables import DynamicGeneratorRegistry, default_registry
from .variable_substitution import extract_variables, find_unresolved, resolve, resolve_dict
from .auth import apply_auth
from .request_assembler import assemble
from .proxy_client import ProxyClient
from .tab_store import TabStore
from .history_ledger import HistoryLedger
from .execution_controller import ExecutionController, SendOutcome
from .history_service import save_history, load_history, restore_ledger, clear_history
from .environment_service import get_environment
from .curl import build_curl, parse_curl

__all__ = [
    "DynamicGeneratorRegistry",
    "default_registry",
    "extract_variables",
    "find_unresolved",
    "resolve",
    "resolve_dict",
    "apply_auth",
    "assemble",
    "ProxyClient",
    "TabStore",
    "HistoryLedger",
    "ExecutionController",
    "SendOutcome",
    "save_history",
    "load_history",
    "restore_ledger",
    "clear_history",
    "get_environment",
    "build_curl",
    "parse_curl",
]

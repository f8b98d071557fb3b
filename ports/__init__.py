from .backend import LookupBackendPort
from .presenter import PresenterPort, StatusStyle
from .storage import KeyValueStorePort

__all__ = [
    "LookupBackendPort",
    "PresenterPort",
    "StatusStyle",
    "KeyValueStorePort",
]

from .registry_base import NameRegistry
from .registry_manager import BranchRegistry, RegistryManager, TreeRegistry

__all__ = ["NameRegistry", "TreeRegistry", "BranchRegistry", "RegistryManager"]

from defi_actions.core.adapters.BaseAdapter import BaseAdapter
from defi_actions.core.adapters.models import Action, ActionStep
from defi_actions.core.errors import DefiActionError, ErrorCode

__all__ = [
    "Action",
    "ActionStep",
    "BaseAdapter",
    "DefiActionError",
    "ErrorCode",
]

__version__ = "0.1.0"

from defi_actions.core import (
    Action,
    ActionStep,
    BaseAdapter,
    DefiActionError,
    ErrorCode,
)

__all__ = [
    "__version__",
    "Action",
    "ActionStep",
    "BaseAdapter",
    "DefiActionError",
    "ErrorCode",
]

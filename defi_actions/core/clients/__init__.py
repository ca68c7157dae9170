from defi_actions.core.clients.HttpJsonClient import HttpJsonClient

__all__ = ["HttpJsonClient"]

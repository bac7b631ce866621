"""WhatsApp GREEN-API relay: browser form + backend proxy"""
from wa_relay.app_factory import create_app

__version__ = "1.0.0"

__all__ = ["create_app", "__version__"]

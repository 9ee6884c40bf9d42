from .settings import configure_logging

__all__ = ['configure_logging']

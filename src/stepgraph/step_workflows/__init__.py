from .nuget import configure_nuget

__all__ = ["configure_nuget"]

from .dispatcher import ParallelConfig, ParallelDispatcher, for_each

__all__ = ["ParallelConfig", "ParallelDispatcher", "for_each"]

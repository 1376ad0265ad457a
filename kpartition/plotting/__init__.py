from .plotter import MatplotlibPlotter

__all__ = ["MatplotlibPlotter"]

from .dataset import Dataset
from .validation import as_observations

__all__ = ["Dataset", "as_observations"]

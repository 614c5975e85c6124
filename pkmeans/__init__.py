from .config import KMeansConfig
from .core import ClusteringResult, KMeansThreaded, LoopState, kmeans_clustering
from .exceptions import AllocationError, ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "KMeansConfig",
    "ClusteringResult",
    "KMeansThreaded",
    "LoopState",
    "kmeans_clustering",
    "AllocationError",
    "ConfigurationError",
]

from .base import KMeansBase, LoopState, UNASSIGNED
from .distance import (
    euclid_dist_2,
    find_nearest_cluster,
    find_nearest_clusters,
    squared_distances,
)
from .reducer import Accumulator, ParallelAssignmentReducer, ReductionResult
from .threaded import ClusteringResult, KMeansThreaded, kmeans_clustering

__all__ = [
    "KMeansBase",
    "LoopState",
    "UNASSIGNED",
    "euclid_dist_2",
    "find_nearest_cluster",
    "find_nearest_clusters",
    "squared_distances",
    "Accumulator",
    "ParallelAssignmentReducer",
    "ReductionResult",
    "ClusteringResult",
    "KMeansThreaded",
    "kmeans_clustering",
]

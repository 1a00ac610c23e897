"""
Clustering Engine
=================
Groups data points by proximity in normalized dimension space.

Why is this file needed?
------------------------
1. Bundling: The spline transition moves the points of a cluster along similar
   paths, which keeps adjacent points visually together.
2. Performance: Clustering is the CPU-bound part of preparing a transition. The
   density-based clusterer runs as numba-compiled kernels on packed arrays.

Every clustering function takes (data, dimensions, params) and returns a
partition of the point indices: list[list[int]], clusters non-empty.

Note: This package should be pure Python/NumPy/Numba.
"""

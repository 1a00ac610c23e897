"""
The TRANSITIONS layer computes point positions over animation time.
Each strategy (straight, rotation, spline) implements the ScatterTransition contract.
"""

def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return (b - a) * t + a

def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(lo, min(x, hi))

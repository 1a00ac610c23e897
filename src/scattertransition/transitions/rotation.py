"""
Rotation Transition
===================
Perspective or orthographic rotation between views that share one dimension.

The shared dimension becomes the rotation axis. The unit cube spanned by the old
view and the new out-of-plane dimension (as depth) is rotated by 90 degrees
around that axis, so the new dimension turns into the screen plane. With
perspective enabled, the projection blends from orthographic into perspective and
back, either along a smooth bump (default) or in separate zoom stages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Mapping, Optional, Sequence, TYPE_CHECKING

import numpy as np

from scattertransition import config
from scattertransition.model.params import BoolParam, EnumParam, NumberParam, Schema, resolve_params
from scattertransition.transitions.base import ScatterTransition
from scattertransition.transitions.easing import EASING_VARIANTS, EaseFn, ease_quad
from scattertransition.utils import lerp

if TYPE_CHECKING:
    import numpy.typing as npt

    from scattertransition.model.data import DataPoint
    from scattertransition.model.view import ScatterView

logger = logging.getLogger(__name__)


def _perspective_shown(params: Mapping[str, Any]) -> bool:
    return (params.get("perspective") or 0) > 0


def _staged_shown(params: Mapping[str, Any]) -> bool:
    return bool(params.get("staged"))


ROTATION_PARAMS: Schema = {
    "perspective": NumberParam(domain=(0.0, 1.0), default=0.0),
    "persp_fov": NumberParam(should_show=_perspective_shown, domain=(0.0, 90.0), default=60.0, round=True),
    "camera_distance": NumberParam(should_show=_perspective_shown, domain=(0.0, 5.0), default=1.5),
    "staged": BoolParam(should_show=_perspective_shown, default=False),
    "ease": EnumParam(should_show=_staged_shown, variants=EASING_VARIANTS, default=1),
    "zoom_time": NumberParam(should_show=_staged_shown, domain=(0.0, 0.5), default=0.2),
}


@dataclass
class RotationParams:
    """
    Attributes:
        perspective: How much perspective to use. 0 for orthographic, 1 for perspective.
        persp_fov: Perspective field of view in degrees.
        camera_distance: Distance of the camera from the cube.
        staged: If True, perspective zooms in and out as separate stages around the rotation.
        ease: Inner easing function of staged animations.
        zoom_time: If staged, how much of t is spent zooming in/out of perspective.
    """
    perspective: float = 0.0
    persp_fov: float = 60.0
    camera_distance: float = 1.5
    staged: bool = False
    ease: EaseFn = field(default=ease_quad)
    zoom_time: float = 0.2

    def __post_init__(self) -> None:
        for name in ("perspective", "persp_fov", "camera_distance", "zoom_time"):
            setattr(self, name, ROTATION_PARAMS[name].resolve(getattr(self, name)))
        # A zero field of view or camera distance cannot be projected, and a
        # zero zoom time would skip the orthographic start and end stages
        for name in ("persp_fov", "camera_distance", "zoom_time"):
            if not getattr(self, name):
                setattr(self, name, ROTATION_PARAMS[name].default)

    @classmethod
    def resolve(cls, values: Optional[Mapping[str, Any]] = None) -> RotationParams:
        resolved = resolve_params(ROTATION_PARAMS, values)
        return cls(**{name: resolved[name] for name in ROTATION_PARAMS})


# ==========================================
# 4x4 MATRIX HELPERS (column vectors)
# ==========================================

def translation_matrix(offset: Sequence[float]) -> npt.NDArray[np.float64]:
    m = np.eye(4)
    m[:3, 3] = offset
    return m


def axis_rotation_matrix(axis: str, angle_rad: float) -> npt.NDArray[np.float64]:
    """Right-handed rotation about one of the coordinate axes."""
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    m = np.eye(4)
    if axis == "x":
        m[1, 1], m[1, 2], m[2, 1], m[2, 2] = c, -s, s, c
    elif axis == "y":
        m[0, 0], m[0, 2], m[2, 0], m[2, 2] = c, s, -s, c
    elif axis == "z":
        m[0, 0], m[0, 1], m[1, 0], m[1, 1] = c, -s, s, c
    else:
        raise ValueError(f"Invalid rotation axis '{axis}'.")
    return m


def ortho_matrix(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> npt.NDArray[np.float64]:
    """OpenGL-style orthographic projection."""
    m = np.zeros((4, 4))
    m[0, 0] = 2 / (right - left)
    m[1, 1] = 2 / (top - bottom)
    m[2, 2] = -2 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    m[3, 3] = 1.0
    return m


def perspective_matrix(fov_y_rad: float, aspect: float, near: float, far: float) -> npt.NDArray[np.float64]:
    """OpenGL-style perspective projection."""
    f = 1.0 / math.tan(fov_y_rad / 2)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = 2 * far * near / (near - far)
    m[3, 2] = -1.0
    return m


NEAR_PLANE = 0.1
FAR_PLANE = 1.5
ORTHO_PROJECTION = ortho_matrix(-0.5, 0.5, -0.5, 0.5, NEAR_PLANE, FAR_PLANE)
CUBE_CENTER = (0.5, 0.5, 0.5)


class SingleRotationTransition:
    """
    Rotation between exactly two views. Matrices are cached for the last queried t.
    """

    def __init__(self, start_view: ScatterView, end_view: ScatterView, params: RotationParams) -> None:
        self.start_view = start_view
        self.end_view = end_view
        self.params = params
        self.rot_axis = "x" if start_view.x.eq(end_view.x) else "y"

        self._cached_t: Optional[float] = None
        self._cached_rotation: Optional[npt.NDArray[np.float64]] = None
        self._cached_projection: Optional[npt.NDArray[np.float64]] = None
        self._cached_transform: Optional[npt.NDArray[np.float64]] = None

    def ease(self, t: float) -> float:
        return self.params.ease(t)

    def progress(self, t: float) -> tuple[float, float]:
        """
        Maps segment time to geometry.

        Returns:
            (rotation fraction in [0, 1] of a quarter turn, perspective blend factor in [0, 1])
        """
        p = self.params
        persp_trans_time = p.zoom_time * p.perspective * (1 if p.staged else 0)

        rotation = 0.0
        persp_factor = 0.0
        if t < persp_trans_time:
            persp_factor = self.ease(t / persp_trans_time)
        elif t < 1 - persp_trans_time:
            uneased = (t - persp_trans_time) / (1 - 2 * persp_trans_time)
            # easing only applies to staged animations
            eased = self.ease(uneased) if p.staged else uneased
            rotation = lerp(uneased, eased, p.perspective)
            persp_factor = 1.0
        else:
            rotation = 1.0
            persp_factor = 1 - self.ease((t - 1 + persp_trans_time) / persp_trans_time) if persp_trans_time else 0.0

        if not p.staged:
            # scaled circle segment (x)^2 + (y + 1)^2 = 2, in sync with the rotation
            persp_factor = config.PERSPECTIVE_BUMP_COEFFICIENT * (math.sqrt(2 - (2 * t - 1) ** 2) - 1)

        return rotation, persp_factor

    def rotation_angle(self, t: float) -> float:
        """Signed rotation angle in radians."""
        rotation, _ = self.progress(t)
        # x rotates in the opposite direction, so that both axes appear to turn the same way
        if self.rot_axis == "x":
            rotation *= -1
        return rotation * math.pi / 2

    def _cache_data(self, t: float) -> None:
        _, persp_factor = self.progress(t)
        angle = self.rotation_angle(t)

        rotation = (
            translation_matrix(CUBE_CENTER)
            @ axis_rotation_matrix(self.rot_axis, angle)
            @ translation_matrix([-c for c in CUBE_CENTER])
        )

        blend = persp_factor * self.params.perspective
        persp = perspective_matrix(math.radians(self.params.persp_fov), 1.0, NEAR_PLANE, FAR_PLANE)
        view_offset = translation_matrix([-0.5, -0.5, -self.params.camera_distance])
        projection = (ORTHO_PROJECTION * (1 - blend) + persp * blend) @ view_offset

        self._cached_t = t
        self._cached_rotation = rotation
        self._cached_projection = projection
        self._cached_transform = projection @ rotation

    def _ensure_cache(self, t: float) -> None:
        if t != self._cached_t:
            self._cache_data(t)

    def get_rotation(self, t: float) -> npt.NDArray[np.float64]:
        self._ensure_cache(t)
        return self._cached_rotation

    def get_projection(self, t: float) -> npt.NDArray[np.float64]:
        self._ensure_cache(t)
        return self._cached_projection

    def project_point(self, t: float, point: DataPoint) -> npt.NDArray[np.float64]:
        """Rotates and projects a point; returns normalized device coordinates (x, y, z, 1)."""
        self._ensure_cache(t)
        if self.rot_axis == "x":
            depth = self.end_view.get_y(point)
        else:
            depth = self.end_view.get_x(point)
        p = np.array([self.start_view.get_x(point), self.start_view.get_y(point), depth, 1.0])

        p = self._cached_transform @ p
        p[:3] /= p[3]
        p[3] = 1.0
        return p

    def get_x(self, t: float, point: DataPoint) -> float:
        return float(self.project_point(t, point)[0] / 2 + 0.5)

    def get_y(self, t: float, point: DataPoint) -> float:
        return float(self.project_point(t, point)[1] / 2 + 0.5)


class RotationTransition(ScatterTransition):
    """
    A rotation transition can swap out a single dimension.
    It uses depth to add the new dimension and rotates the entire view to the new dimension pair.
    If perspective is used, it will also "zoom out" from orthographic to perspective projection.
    """
    NAME = "Rotation"
    requires_common_dimensions = True
    can_swap_dimensions = False
    PARAMS = ROTATION_PARAMS

    def __init__(
        self,
        views: Sequence[ScatterView],
        params: RotationParams | Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(params, RotationParams):
            params = RotationParams.resolve(params)
        super().__init__(views, params)
        self.transitions = [
            SingleRotationTransition(start, end, params)
            for start, end in zip(self.views[:-1], self.views[1:])
        ]
        logger.debug(f"Rotation over {len(self.transitions)} segment(s), perspective={params.perspective}")

    def _segment(self, t: float) -> tuple[SingleRotationTransition, float]:
        t *= len(self.views) - 1
        index = min(max(math.floor(t), 0), len(self.transitions) - 1)
        return self.transitions[index], t - index

    def get_x(self, t: float, point: DataPoint) -> float:
        segment, local_t = self._segment(t)
        return segment.get_x(local_t, point)

    def get_y(self, t: float, point: DataPoint) -> float:
        segment, local_t = self._segment(t)
        return segment.get_y(local_t, point)

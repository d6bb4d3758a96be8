import numpy as np
from geometry import Sphere, Hit, no_hit
from utils import *

"""
Core implementation of the ray tracer.  This module contains the lights and
the Scene that hold the contents of a frame, the Ray, Viewport and Canvas used
to cast one ray per pixel, and the functions (compute_lighting, trace_ray)
used in the rendering algorithm, with the main entry point `render_image`.

Vectors are NumPy arrays of shape (3,) and colors are uint8 arrays of shape
(3,), as built by `utils.vec` and `utils.rgb8`.
"""

INF = np.inf
MIN_T = 1.0 # ignore hits between the camera and the viewport plane
BACKGROUND_COLOR = rgb8([255, 255, 255])

ORIGIN = vec([0, 0, 0])
ORIGIN.setflags(write=False)


class Ray:

    def __init__(self, origin, direction, start=0., end=np.inf):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, a 3D vector (not necessarily normalized)
          start, end : float -- hits count only for start < t < end
        """
        # Convert these vectors to double to help ensure intersection
        # computations will be done in double precision
        self.origin = np.array(origin, np.float64)
        self.direction = np.array(direction, np.float64)
        self.start = start
        self.end = end


class Viewport:

    def __init__(self, width=1.0, height=1.0, distance=1.0):
        """Create the projection plane the camera looks through.

        Parameters:
          width, height : float -- size of the plane in scene units
          distance : float -- distance of the plane from the camera along +z
        """
        if min(width, height, distance) <= 0:
            raise ValueError(f"viewport dimensions must be positive, got {(width, height, distance)}")
        self.width = float(width)
        self.height = float(height)
        self.distance = float(distance)

DEFAULT_VIEWPORT = Viewport(1.0, 1.0, 1.0)


def canvas_to_viewport(cx, cy, canvas_width, canvas_height, viewport=DEFAULT_VIEWPORT):
    """Direction of the ray from the camera through canvas offset (cx, cy).

    The result is not normalized; its length grows toward the canvas edges.
    """
    return np.array([
        cx * viewport.width / canvas_width,
        cy * viewport.height / canvas_height,
        viewport.distance,
    ], np.float64)


class Canvas:

    def __init__(self, width, height):
        """Create a width x height raster addressed by offsets centered on the raster."""
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    @property
    def x_range(self):
        return range(-(self.width // 2), self.width - self.width // 2)

    @property
    def y_range(self):
        return range(-(self.height // 2), self.height - self.height // 2)

    def each(self):
        """Lazily yield every (cx, cy) offset, column by column."""
        for cx in self.x_range:
            for cy in self.y_range:
                yield cx, cy

    def to_screen(self, cx, cy):
        """Map a canvas offset to top-left-origin screen coordinates (y flipped)."""
        return self.width // 2 + cx, self.height // 2 - cy


def _diffuse(intensity, normal, light_vec):
    n_dot_l = np.dot(normal, light_vec)
    # light arriving from behind the surface contributes nothing
    if n_dot_l > 0:
        return intensity * float(n_dot_l) / (length(normal) * length(light_vec))
    return 0.0


class AmbientLight:

    def __init__(self, intensity):
        """Create an ambient light of given intensity
        """
        self.intensity = float(intensity)

    def illuminate(self, point, normal):
        return self.intensity

    def __repr__(self):
        return f"AmbientLight({self.intensity})"


class PointLight:
    def __init__(self, position, intensity):
        """Create a point light at given position and with given intensity"""
        self.position = vec(position)
        if not np.all(np.isfinite(self.position)):
            raise ValueError(f"point light position must be finite, got {position}")
        self.position.setflags(write=False)
        self.intensity = float(intensity)

    def illuminate(self, point, normal):
        """Diffuse term for a surface at point with the given normal."""
        return _diffuse(self.intensity, normal, self.position - point)

    def __repr__(self):
        return f"PointLight({self.position.tolist()}, {self.intensity})"


class DirectionalLight:
    def __init__(self, direction, intensity):
        """Create a light arriving from a fixed direction (pointing toward the light)."""
        self.direction = vec(direction)
        if not np.all(np.isfinite(self.direction)):
            raise ValueError(f"light direction must be finite, got {direction}")
        self.direction.setflags(write=False)
        self.intensity = float(intensity)
        if length(self.direction) == 0:
            print(f"Warning: directional light with zero-length direction never contributes: {self!r}")

    def illuminate(self, point, normal):
        """Diffuse term for a surface with the given normal; point is unused."""
        return _diffuse(self.intensity, normal, self.direction)

    def __repr__(self):
        return f"DirectionalLight({self.direction.tolist()}, {self.intensity})"

LIGHT_TYPES = (AmbientLight, PointLight, DirectionalLight)


class Scene:

    def __init__(self, spheres=(), lights=(), bg_color=BACKGROUND_COLOR):
        """Create a scene containing the given spheres and lights.

        Both sequences may be empty. They are copied into tuples and
        never modified afterwards.
        """
        self.spheres = tuple(spheres)
        self.lights = tuple(lights)
        for sphere in self.spheres:
            if not isinstance(sphere, Sphere):
                raise TypeError(f"scene spheres must be Sphere instances, got {type(sphere).__name__}")
        for light in self.lights:
            if not isinstance(light, LIGHT_TYPES):
                raise TypeError(f"unsupported light type {type(light).__name__}")
        self.bg_color = rgb8(bg_color)

    def intersect(self, ray):
        """Computes the first (smallest t) intersection between a ray and the scene.

        A root counts only when ray.start < t < ray.end. Equal roots keep
        the earlier sphere, and t1 before t2 within a sphere.
        """
        closest_t = np.inf
        closest_sphere = None
        for sphere in self.spheres:
            t1, t2 = sphere.intersect(ray)
            if ray.start < t1 < ray.end and t1 < closest_t:
                closest_t = t1
                closest_sphere = sphere
            if ray.start < t2 < ray.end and t2 < closest_t:
                closest_t = t2
                closest_sphere = sphere

        if closest_sphere is None:
            return no_hit

        point = ray.origin + closest_t * ray.direction
        normal = normalize(point - closest_sphere.center)
        return Hit(closest_t, point, normal, closest_sphere)


def compute_lighting(point, normal, scene):
    """Total light intensity at a surface point. Not clamped."""
    intensity = 0.0
    for light in scene.lights:
        intensity += light.illuminate(point, normal)
    return intensity


def trace_ray(origin, direction, min_t, max_t, scene):
    """Color seen along a ray: the nearest sphere shaded, or the background."""
    hit = scene.intersect(Ray(origin, direction, min_t, max_t))
    if hit.t == np.inf:
        return scene.bg_color
    return scale_color(hit.sphere.color, compute_lighting(hit.point, hit.normal, scene))


def pixel_color(cx, cy, canvas, scene, viewport=DEFAULT_VIEWPORT):
    """Color of canvas offset (cx, cy), with the camera at the origin looking along +z."""
    direction = canvas_to_viewport(cx, cy, canvas.width, canvas.height, viewport)
    return trace_ray(ORIGIN, direction, MIN_T, INF, scene)


def render_image(scene, canvas, surface, viewport=DEFAULT_VIEWPORT, verbose=False):
    """
    render a ray traced image onto a pixel surface.

    The surface needs set_pixel(x, y, color) taking screen coordinates;
    it is returned so calls can be chained.
    """
    first_row = canvas.y_range[0]
    for cx, cy in canvas.each():
        if verbose and cy == first_row:
            print(f"rendering column {cx - canvas.x_range[0] + 1}/{canvas.width}...")
        x, y = canvas.to_screen(cx, cy)
        surface.set_pixel(x, y, pixel_color(cx, cy, canvas, scene, viewport))
    return surface

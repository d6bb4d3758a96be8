import numpy as np
from utils import vec, rgb8

class Hit:
    def __init__(self, t, point=None, normal=None, sphere=None):
        """Create a Hit with the given data.

        Parameters:
          t : float -- the t value of the intersection along the ray
          point : (3,) -- the 3D point where the intersection happens
          normal : (3,) -- the 3D outward-facing unit normal to the surface at the hit point
          sphere : (Sphere) -- the sphere that was hit
        """
        self.t = t
        self.point = point
        self.normal = normal
        self.sphere = sphere

# Value to represent absence of an intersection
no_hit = Hit(np.inf)

# Root pair returned when a ray misses a sphere
no_roots = (np.inf, np.inf)


class Sphere:

    def __init__(self, center, radius, color):
        """Create a sphere with the given center, radius and color.

        Parameters:
          center : (3,) -- a 3D point specifying the sphere's center
          radius : float -- a strictly positive Python float
          color : (3,) -- 8-bit RGB color of the surface
        """
        radius = float(radius)
        if not np.isfinite(radius) or radius <= 0:
            raise ValueError(f"sphere radius must be a positive number, got {radius}")
        self.center = vec(center)
        self.center.setflags(write=False)
        self.radius = radius
        self.color = rgb8(color)

    def intersect(self, ray):
        """Computes both roots of the intersection between a ray and this sphere.

        Parameters:
          ray : Ray -- the ray to intersect with the sphere
        Return:
          (t1, t2) -- the roots, or no_roots if the ray misses
        """
        return intersect_ray_sphere(ray.origin, ray.direction, self)

    def __repr__(self):
        return f"Sphere(center={self.center.tolist()}, radius={self.radius}, color={self.color.tolist()})"


def intersect_ray_sphere(origin, direction, sphere):
    """Solve a*t^2 + b*t + c = 0 for the ray origin + t * direction.

    The direction does not need to be normalized; t is a multiple of it.
    Returns (t1, t2) with t1 >= t2, or no_roots when there is no real
    solution. A zero-length or non-finite direction also gives no_roots.
    """
    direction = np.asarray(direction, np.float64)
    sphere_vec = np.asarray(origin, np.float64) - sphere.center
    a = np.dot(direction, direction)
    if not np.isfinite(a) or a == 0:
        return no_roots
    b = 2 * np.dot(sphere_vec, direction)
    c = np.dot(sphere_vec, sphere_vec) - sphere.radius * sphere.radius
    discriminant = b * b - 4 * a * c
    if not discriminant >= 0:
        return no_roots
    disc_sqrt = np.sqrt(discriminant)
    t1 = (-b + disc_sqrt) / (2 * a)
    t2 = (-b - disc_sqrt) / (2 * a)
    return float(t1), float(t2)

import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock
import numpy as np
from tracer import *
from geometry import intersect_ray_sphere, no_roots, no_hit
from utils import normalize, vec, rgb8, scale_color
from ImLite import Image
from ExampleSceneDef import AmbientOnlyExample, DefaultSceneExample, EmptySceneExample

WHITE = [255, 255, 255]


class RecordingSurface:
    """Pixel surface that remembers every write."""

    def __init__(self):
        self.writes = {}

    def set_pixel(self, x, y, color):
        self.writes[(x, y)] = tuple(int(c) for c in color)


class TestSphereIntersect(unittest.TestCase):

    def test_roots_along_axis(self):
        sphere = Sphere(vec([0, 0, 3]), 1.0, rgb8([255, 0, 0]))
        t1, t2 = intersect_ray_sphere(vec([0, 0, 0]), vec([0, 0, 1]), sphere)
        self.assertAlmostEqual(t1, 4.0)
        self.assertAlmostEqual(t2, 2.0)

    def test_roots_scale_with_direction(self):
        # t is a multiple of the direction, not a distance
        sphere = Sphere(vec([0, 0, 3]), 1.0, rgb8([255, 0, 0]))
        t1, t2 = intersect_ray_sphere(vec([0, 0, 0]), vec([0, 0, 2]), sphere)
        self.assertAlmostEqual(t1, 2.0)
        self.assertAlmostEqual(t2, 1.0)

    def test_off_center_hit(self):
        unit_sphere = Sphere(vec([0, 0, 0]), 1.0, rgb8([255, 0, 0]))
        t1, t2 = intersect_ray_sphere(vec([-2.0, 0.5, 0.0]), vec([1.0, 0.0, 0.0]), unit_sphere)
        self.assertAlmostEqual(t2, 2 - np.sin(np.pi/3))
        self.assertAlmostEqual(t1, 2 + np.sin(np.pi/3))

    def test_misses_return_sentinel(self):
        origin = vec([0, 0, 0])
        direction = vec([0, 0, 1])
        for center in ([1.5, 0, 5], [-2, 0, 5], [0, 10, 5], [3, -3, 1], [0, 1.01, 2]):
            sphere = Sphere(vec(center), 1.0, rgb8([0, 0, 255]))
            self.assertEqual(intersect_ray_sphere(origin, direction, sphere), no_roots)

    def test_zero_direction_is_no_intersection(self):
        sphere = Sphere(vec([0, 0, 0]), 1.0, rgb8([0, 0, 255]))
        roots = intersect_ray_sphere(vec([0, 0, 0]), vec([0, 0, 0]), sphere)
        self.assertEqual(roots, no_roots)

    def test_ray_method_matches_function(self):
        sphere = Sphere(vec([1, 2, 6]), 2.0, rgb8([0, 0, 255]))
        ray = Ray(vec([0, 0, 0]), vec([0.1, 0.3, 1]))
        self.assertEqual(sphere.intersect(ray), intersect_ray_sphere(ray.origin, ray.direction, sphere))

    def test_invalid_radius_rejected(self):
        for radius in (0.0, -1.0, float('nan'), float('inf')):
            with self.assertRaises(ValueError):
                Sphere(vec([0, 0, 3]), radius, rgb8([255, 0, 0]))


class TestClosestHit(unittest.TestCase):

    def test_hit_point_and_normal(self):
        scene = Scene([Sphere(vec([0, 0, 3]), 1.0, rgb8([255, 0, 0]))])
        hit = scene.intersect(Ray(vec([0, 0, 0]), vec([0, 0, 1]), MIN_T, INF))
        self.assertAlmostEqual(hit.t, 2.0)
        np.testing.assert_almost_equal(hit.point, [0, 0, 2])
        np.testing.assert_almost_equal(hit.normal, [0, 0, -1])
        self.assertIs(hit.sphere, scene.spheres[0])

    def test_nearest_sphere_wins(self):
        far = Sphere(vec([0, 0, 10]), 1.0, rgb8([0, 0, 255]))
        near = Sphere(vec([0, 0, 5]), 1.0, rgb8([255, 0, 0]))
        hit = Scene([far, near]).intersect(Ray(vec([0, 0, 0]), vec([0, 0, 1]), MIN_T, INF))
        self.assertIs(hit.sphere, near)
        self.assertAlmostEqual(hit.t, 4.0)

    def test_interval_is_open(self):
        # roots of this sphere are exactly t=1 and t=5
        scene = Scene([Sphere(vec([0, 0, 3]), 2.0, rgb8([255, 0, 0]))])
        origin, direction = vec([0, 0, 0]), vec([0, 0, 1])
        self.assertAlmostEqual(scene.intersect(Ray(origin, direction, 1.0, INF)).t, 5.0)
        self.assertAlmostEqual(scene.intersect(Ray(origin, direction, 0.0, 5.0)).t, 1.0)
        self.assertIs(scene.intersect(Ray(origin, direction, 1.0, 5.0)), no_hit)

    def test_tie_keeps_earlier_sphere(self):
        red = Sphere(vec([0, 0, 3]), 1.0, rgb8([255, 0, 0]))
        blue = Sphere(vec([0, 0, 3]), 1.0, rgb8([0, 0, 255]))
        lights = [AmbientLight(1.0)]
        origin, direction = vec([0, 0, 0]), vec([0, 0, 1])
        np.testing.assert_array_equal(trace_ray(origin, direction, MIN_T, INF, Scene([red, blue], lights)), [255, 0, 0])
        np.testing.assert_array_equal(trace_ray(origin, direction, MIN_T, INF, Scene([blue, red], lights)), [0, 0, 255])


class TestLighting(unittest.TestCase):

    def lighting_at(self, light, n=vec([0, 1, 0])):
        return compute_lighting(vec([0, 0, 0]), n, Scene([], [light]))

    def test_ambient(self):
        self.assertAlmostEqual(self.lighting_at(AmbientLight(0.3)), 0.3)

    def test_point_overhead(self):
        self.assertAlmostEqual(self.lighting_at(PointLight(vec([0, 4, 0]), 0.6)), 0.6)

    def test_point_at_sixty_degrees(self):
        # light vector length and normal length do not matter
        light = PointLight(3 * normalize(vec([0, 1, np.sqrt(3)])), 1.0)
        self.assertAlmostEqual(self.lighting_at(light), 0.5, places=6)
        self.assertAlmostEqual(self.lighting_at(light, n=vec([0, 5, 0])), 0.5, places=6)

    def test_point_behind_surface(self):
        self.assertEqual(self.lighting_at(PointLight(vec([0, -2, 0]), 0.6)), 0.0)
        self.assertEqual(self.lighting_at(PointLight(vec([3, 0, 0]), 0.6)), 0.0)

    def test_point_at_surface_point(self):
        self.assertEqual(self.lighting_at(PointLight(vec([0, 0, 0]), 0.6)), 0.0)

    def test_directional(self):
        self.assertAlmostEqual(self.lighting_at(DirectionalLight(vec([0, 2, 0]), 0.2)), 0.2)
        self.assertEqual(self.lighting_at(DirectionalLight(vec([0, -1, 0]), 0.2)), 0.0)

    def test_non_finite_light_vectors_rejected(self):
        with self.assertRaises(ValueError):
            PointLight(vec([0, np.nan, 0]), 0.6)
        with self.assertRaises(ValueError):
            PointLight(vec([np.inf, 0, 0]), 0.6)
        with self.assertRaises(ValueError):
            DirectionalLight(vec([1, np.nan, 4]), 0.2)

    def test_zero_directional_warns_and_adds_nothing(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            light = DirectionalLight(vec([0, 0, 0]), 0.5)
        self.assertIn("Warning", out.getvalue())
        self.assertEqual(self.lighting_at(light), 0.0)

    def test_lights_accumulate_without_clamp(self):
        scene = Scene([], [AmbientLight(0.7), PointLight(vec([0, 2, 0]), 0.6), DirectionalLight(vec([0, 1, 0]), 0.5)])
        self.assertAlmostEqual(compute_lighting(vec([0, 0, 0]), vec([0, 1, 0]), scene), 1.8)

    def test_no_shadows(self):
        # the blocker sits between the point and the light but is ignored
        blocker = Sphere(vec([0, 2, 0]), 0.5, rgb8([0, 0, 0]))
        scene = Scene([blocker], [PointLight(vec([0, 4, 0]), 0.6)])
        self.assertAlmostEqual(compute_lighting(vec([0, 0, 0]), vec([0, 1, 0]), scene), 0.6)


class TestTraceRay(unittest.TestCase):

    def test_ambient_scales_color(self):
        scene = AmbientOnlyExample(0.2).scene
        color = trace_ray(ORIGIN, vec([0, 0, 1]), MIN_T, INF, scene)
        np.testing.assert_array_equal(color, [40, 20, 10])
        self.assertEqual(color.dtype, np.uint8)

    def test_miss_returns_background(self):
        scene = DefaultSceneExample().scene
        np.testing.assert_array_equal(trace_ray(ORIGIN, vec([1, 0, 0]), MIN_T, INF, scene), WHITE)

    def test_empty_scene_is_background(self):
        np.testing.assert_array_equal(trace_ray(ORIGIN, vec([0, 0, 1]), MIN_T, INF, Scene()), WHITE)

    def test_overflow_saturates(self):
        scene = AmbientOnlyExample(2.0).scene
        np.testing.assert_array_equal(trace_ray(ORIGIN, vec([0, 0, 1]), MIN_T, INF, scene), [255, 200, 100])

    def test_negative_light_floors_at_black(self):
        scene = AmbientOnlyExample(-0.5).scene
        np.testing.assert_array_equal(trace_ray(ORIGIN, vec([0, 0, 1]), MIN_T, INF, scene), [0, 0, 0])

    def test_background_is_read_only(self):
        color = trace_ray(ORIGIN, vec([1, 0, 0]), MIN_T, INF, Scene())
        with self.assertRaises(ValueError):
            color[0] = 0

    def test_default_scene_below_center_hits_red_sphere(self):
        scene = DefaultSceneExample().scene
        color = pixel_color(0, -60, Canvas(800, 600), scene)
        self.assertGreater(color[0], 0)
        self.assertEqual(color[1], 0)
        self.assertEqual(color[2], 0)


class TestColors(unittest.TestCase):

    def test_scale_truncates(self):
        np.testing.assert_array_equal(scale_color(rgb8([255, 255, 255]), 0.999), [254, 254, 254])
        np.testing.assert_array_equal(scale_color(rgb8([10, 20, 30]), 1.0), [10, 20, 30])

    def test_rgb8_validation(self):
        with self.assertRaises(ValueError):
            rgb8([256, 0, 0])
        with self.assertRaises(ValueError):
            rgb8([-1, 0, 0])
        with self.assertRaises(ValueError):
            rgb8([1, 2])
        with self.assertRaises(ValueError):
            rgb8([np.nan, 0, 0])


class TestProjection(unittest.TestCase):

    def test_center_ray(self):
        np.testing.assert_almost_equal(canvas_to_viewport(0, 0, 800, 600), [0, 0, 1])

    def test_corner_ray(self):
        np.testing.assert_almost_equal(canvas_to_viewport(400, 300, 800, 600), [0.5, 0.5, 1])
        np.testing.assert_almost_equal(canvas_to_viewport(-400, -300, 800, 600), [-0.5, -0.5, 1])

    def test_custom_viewport(self):
        viewport = Viewport(2.0, 1.0, 3.0)
        np.testing.assert_almost_equal(canvas_to_viewport(100, -150, 800, 600, viewport), [0.25, -0.25, 3.0])

    def test_invalid_viewport_rejected(self):
        with self.assertRaises(ValueError):
            Viewport(1.0, 0.0, 1.0)


class TestCanvas(unittest.TestCase):

    def test_to_screen(self):
        canvas = Canvas(800, 600)
        self.assertEqual(canvas.to_screen(0, 0), (400, 300))
        self.assertEqual(canvas.to_screen(-400, 300), (0, 0))
        self.assertEqual(canvas.to_screen(399, -299), (799, 599))

    def test_each_covers_centered_range(self):
        offsets = list(Canvas(4, 2).each())
        self.assertEqual(len(offsets), 8)
        self.assertEqual(len(set(offsets)), 8)
        self.assertEqual(offsets[0], (-2, -1))
        self.assertEqual({cx for cx, _ in offsets}, {-2, -1, 0, 1})
        self.assertEqual({cy for _, cy in offsets}, {-1, 0})

    def test_invalid_size_rejected(self):
        with self.assertRaises(ValueError):
            Canvas(0, 10)


class TestRenderImage(unittest.TestCase):

    def test_writes_every_offset_through_mapping(self):
        surface = RecordingSurface()
        canvas = Canvas(4, 2)
        render_image(Scene(), canvas, surface)
        self.assertEqual(set(surface.writes), {canvas.to_screen(cx, cy) for cx, cy in canvas.each()})
        self.assertTrue(all(color == (255, 255, 255) for color in surface.writes.values()))

    def test_small_frame(self):
        im = AmbientOnlyExample(0.2).render(output_shape=[6, 8])
        self.assertEqual((im.height, im.width), (6, 8))
        np.testing.assert_array_equal(im.get_pixel(4, 3), [40, 20, 10])
        np.testing.assert_array_equal(im.get_pixel(0, 1), WHITE)

    def test_empty_scene_renders_background(self):
        im = EmptySceneExample().render(output_shape=[6, 8])
        self.assertTrue(np.all(im.pixels == 255))

    def test_render_is_idempotent(self):
        example = DefaultSceneExample()
        first = example.render(output_shape=[12, 16])
        second = example.render(output_shape=[12, 16])
        self.assertEqual(first, second)

    def test_verbose_prints_progress(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            render_image(Scene(), Canvas(3, 2), RecordingSurface(), verbose=True)
        self.assertEqual(out.getvalue().count("rendering column"), 3)


class TestImage(unittest.TestCase):

    def test_blank(self):
        im = Image.Blank(4, 3, [1, 2, 3])
        self.assertEqual((im.width, im.height), (4, 3))
        np.testing.assert_array_equal(im.get_pixel(3, 2), [1, 2, 3])

    def test_writes_outside_are_clipped(self):
        im = Image.Blank(4, 3)
        for x, y in ((-1, 0), (4, 0), (0, 3), (0, -1)):
            im.set_pixel(x, y, [255, 0, 0])
        self.assertTrue(np.all(im.pixels == 0))
        im.set_pixel(3, 2, [255, 0, 0])
        np.testing.assert_array_equal(im.pixels[2, 3], [255, 0, 0])

    def test_clear(self):
        im = Image.Blank(2, 2)
        im.clear(WHITE)
        self.assertTrue(np.all(im.pixels == 255))

    def test_present_shows_frame(self):
        im = Image.Blank(2, 2)
        with mock.patch.object(Image, "show") as show:
            im.present()
        show.assert_called_once_with()

    def test_write_png(self):
        im = Image.Blank(5, 4, [10, 20, 30])
        im.set_pixel(1, 1, [200, 100, 50])
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "frame.png")
            im.writeToFile(path)
            self.assertEqual(Image(path=path), im)


class TestCli(unittest.TestCase):

    def test_render_to_file(self):
        import cli
        scene = AmbientOnlyExample(0.2).scene
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.png")
            with contextlib.redirect_stdout(io.StringIO()):
                im = cli.render(scene, output_path=path, width=8, height=6)
            self.assertTrue(os.path.exists(path))
        np.testing.assert_array_equal(im.get_pixel(4, 3), [40, 20, 10])

    def test_quit_events(self):
        import pygame
        from window import should_quit
        self.assertTrue(should_quit(pygame.event.Event(pygame.QUIT)))
        self.assertTrue(should_quit(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)))
        self.assertFalse(should_quit(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a)))
        self.assertFalse(should_quit(pygame.event.Event(pygame.MOUSEMOTION)))


class TestWindow(unittest.TestCase):

    def setUp(self):
        # no display needed
        patcher = mock.patch.dict(os.environ, {"SDL_VIDEODRIVER": "dummy"})
        patcher.start()
        self.addCleanup(patcher.stop)
        import pygame
        from window import Window
        self.pygame = pygame
        self.window = Window(8, 6)
        self.addCleanup(self.window.close)
        pygame.event.clear()

    def test_poll_empty_queue(self):
        self.assertIsNone(self.window.poll())

    def test_poll_returns_posted_event(self):
        pygame = self.pygame
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
        event = self.window.poll()
        self.assertEqual(event.type, pygame.KEYDOWN)
        self.assertEqual(event.key, pygame.K_a)

    def test_set_pixel_clips_outside_rows(self):
        window = self.window
        window.clear(WHITE)
        window.set_pixel(3, window.height, [255, 0, 0])
        window.set_pixel(-1, 0, [255, 0, 0])
        window.set_pixel(3, 2, [255, 0, 0])
        self.assertEqual(tuple(window.surface.get_at((3, 2)))[:3], (255, 0, 0))
        self.assertEqual(tuple(window.surface.get_at((3, window.height - 1)))[:3], (255, 255, 255))

    def test_render_into_window(self):
        render_image(Scene(), Canvas(8, 6), self.window)
        self.window.present()
        self.assertEqual(tuple(self.window.surface.get_at((0, 5)))[:3], (255, 255, 255))

    def test_wait_for_quit_returns_on_escape(self):
        pygame = self.pygame
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        self.window.wait_for_quit(60)

    def test_wait_for_quit_returns_on_close(self):
        pygame = self.pygame
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        self.window.wait_for_quit(60)


if __name__ == '__main__':
    unittest.main()

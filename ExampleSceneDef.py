import tracer
from ImLite import *
from utils import *

class ExampleSceneDef(object):
    def __init__(self, scene, canvas=None, viewport=None):
        if(canvas is None):
            canvas = tracer.Canvas(800, 600);
        if(viewport is None):
            viewport = tracer.DEFAULT_VIEWPORT;
        self.scene = scene;
        self.canvas = canvas;
        self.viewport = viewport;

    def render(self, output_path=None, output_shape=None, verbose=False):
        canvas = self.canvas;
        if(output_shape is not None):
            canvas = tracer.Canvas(output_shape[1], output_shape[0]);
        im = Image.Blank(canvas.width, canvas.height, self.scene.bg_color);
        tracer.render_image(self.scene, canvas, im, self.viewport, verbose=verbose);
        if(output_path is None):
            return im;
        else:
            im.writeToFile(output_path);
            return im;


def DefaultSceneExample():
    scene = tracer.Scene(
        spheres=[
            tracer.Sphere(vec([0, -1, 3]), 1.0, rgb8([255, 0, 0])),
            tracer.Sphere(vec([2, 0, 4]), 1.0, rgb8([0, 0, 255])),
            tracer.Sphere(vec([-2, 0, 4]), 1.0, rgb8([0, 255, 0])),
            # Make a big sphere for the floor
            tracer.Sphere(vec([0, -5001, 0]), 5000.0, rgb8([255, 255, 0])),
        ],
        lights=[
            tracer.AmbientLight(0.2),
            tracer.PointLight(vec([2, 1, 0]), 0.6),
            tracer.DirectionalLight(vec([1, 4, 4]), 0.2),
        ],
    )
    return ExampleSceneDef(scene=scene);


def AmbientOnlyExample(intensity=0.2):
    # Flat disc: every hit gets the same scale factor
    scene = tracer.Scene(
        spheres=[tracer.Sphere(vec([0, 0, 3]), 1.0, rgb8([200, 100, 50]))],
        lights=[tracer.AmbientLight(intensity)],
    )
    return ExampleSceneDef(scene=scene);


def EmptySceneExample():
    return ExampleSceneDef(scene=tracer.Scene());

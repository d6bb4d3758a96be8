from utils import *
from tracer import *
from cli import render

red = rgb8([255, 0, 0])
blue = rgb8([0, 0, 255])
green = rgb8([0, 255, 0])
yellow = rgb8([255, 255, 0])

scene = Scene(
    spheres=[
        Sphere(vec([0, -1, 3]), 1.0, red),
        Sphere(vec([2, 0, 4]), 1.0, blue),
        Sphere(vec([-2, 0, 4]), 1.0, green),
        Sphere(vec([0, -5001, 0]), 5000.0, yellow),
    ],
    lights=[
        AmbientLight(0.2),
        PointLight(vec([2, 1, 0]), 0.6),
        DirectionalLight(vec([1, 4, 4]), 0.2),
    ],
)

render(scene)

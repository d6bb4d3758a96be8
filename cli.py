from ExampleSceneDef import DefaultSceneExample
from ImLite import Image
from tracer import Canvas, DEFAULT_VIEWPORT, render_image

"""
Composition root: owns the window size and frame pacing, renders a scene
once and hands the finished frame to a display or a PNG file.
"""

WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
WINDOW_TITLE = "Raytracer"
FRAME_RATE = 60 # idle polling rate once the frame is drawn


def render(scene, output_path=None, width=WINDOW_WIDTH, height=WINDOW_HEIGHT, viewport=DEFAULT_VIEWPORT):
    """Render the scene exactly once.

    With an output_path the frame goes to an Image that is written to that
    file and returned. Otherwise it is drawn into a window that stays open
    until it is closed or Escape is pressed.
    """
    canvas = Canvas(width, height)
    if output_path is not None:
        im = Image.Blank(width, height, scene.bg_color)
        render_image(scene, canvas, im, viewport, verbose=True)
        im.writeToFile(output_path)
        print(f"wrote {width}x{height} image to {output_path}")
        return im

    from window import Window
    with Window(width, height, WINDOW_TITLE) as window:
        # rows the canvas mapping never reaches keep the background
        window.clear(scene.bg_color)
        render_image(scene, canvas, window, viewport, verbose=True)
        window.present()
        window.wait_for_quit(FRAME_RATE)


def main():
    render(DefaultSceneExample().scene)


if __name__ == '__main__':
    main()

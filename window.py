import pygame

"""
Window surface and event source for showing a finished frame with pygame.
"""


def should_quit(event):
    """True for a window close request or an Escape key press."""
    if event.type == pygame.QUIT:
        return True
    return event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE


class Window:

    def __init__(self, width, height, caption="Raytracer"):
        """Open a width x height window whose display surface receives pixels."""
        pygame.init()
        self.surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption(caption)
        self.clock = pygame.time.Clock()

    @property
    def width(self):
        return self.surface.get_width()

    @property
    def height(self):
        return self.surface.get_height()

    def set_pixel(self, x, y, color):
        # set_at ignores points outside the surface
        self.surface.set_at((x, y), (int(color[0]), int(color[1]), int(color[2])))

    def clear(self, color):
        self.surface.fill((int(color[0]), int(color[1]), int(color[2])))

    def present(self):
        pygame.display.flip()

    def poll(self):
        """Next pending event, or None when the queue is empty."""
        event = pygame.event.poll()
        if event.type == pygame.NOEVENT:
            return None
        return event

    def wait_for_quit(self, fps=60):
        """Idle until the window is closed or Escape is pressed, polling fps times a second."""
        while True:
            event = self.poll()
            while event is not None:
                if should_quit(event):
                    return
                event = self.poll()
            self.clock.tick(fps)

    def close(self):
        pygame.quit()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

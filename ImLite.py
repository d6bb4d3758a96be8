from PIL import Image as PIM
import numpy as np

import matplotlib
import matplotlib.pyplot as plt

def aget_ipython():
    try:
        import IPython
        return IPython;
    except ImportError:
        return None;

def runningInNotebook():
    try:
        ipyth = aget_ipython();
        if(ipyth.__class__.__name__ == 'module'):
            ipyth = ipyth.get_ipython();
        shell = ipyth.__class__.__name__;
        if shell == 'ZMQInteractiveShell':
            return True   # Jupyter notebook or qtconsole
        else:
            return False  # Terminal IPython or standard interpreter
    except NameError:
        return False


_ISNOTEBOOK = False;
if(runningInNotebook()):
    _ISNOTEBOOK = True;

def is_notebook():
    return _ISNOTEBOOK;

class Image(object):
    """Image

    An 8-bit RGB raster that doubles as a pixel surface for the tracer:
    pixels are stored as a (height, width, 3) uint8 array with a top-left
    origin, written through set_pixel and flushed with present.
    """

    def __init__(self, pixels=None, path=None):
        # You can do Image(pixels) or Image(path=path)
        self._samples = None;
        self.file_path = path;
        if(pixels is not None):
            self.pixels = pixels;
        elif(path is not None):
            self.loadImageData(path);

    @classmethod
    def Blank(cls, width, height, color=None):
        if (width <= 0 or height <= 0):
            raise ValueError("image size must be positive, got {}x{}".format(width, height));
        if (color is None):
            color = [0, 0, 0];
        pixels = np.empty((height, width, 3), dtype=np.uint8);
        pixels[:] = color;
        return cls(pixels=pixels);

    @property
    def pixels(self):
        return self._samples;

    @pixels.setter
    def pixels(self, data):
        data = np.asarray(data);
        if (data.ndim != 3 or data.shape[2] != 3):
            raise ValueError("expected an RGB array of shape (height, width, 3), got {}".format(data.shape));
        self._samples = data.astype(np.uint8);

    @property
    def width(self):
        return self.pixels.shape[1];

    @property
    def height(self):
        return self.pixels.shape[0];

    ##################//--surface--\\##################
    # <editor-fold desc="surface">
    def set_pixel(self, x, y, color):
        """Write one pixel. Writes outside the raster are clipped, like a display surface."""
        if (0 <= x < self.width and 0 <= y < self.height):
            self._samples[y, x] = color;

    def get_pixel(self, x, y):
        return self._samples[y, x].copy();

    def clear(self, color=None):
        if (color is None):
            color = [0, 0, 0];
        self._samples[:] = color;

    def present(self):
        self.show();
    # </editor-fold>
    ##################\\--surface--//##################

    def loadImageData(self, path=None):
        if (path):
            self.file_path = path;
        pim = PIM.open(fp=self.file_path).convert('RGB');
        self.pixels = np.array(pim);

    def PIL(self):
        return PIM.fromarray(self.pixels);

    def show(self, title=None, new_figure=True, **kwargs):
        if (is_notebook()):
            Image.Show(self, new_figure=new_figure, title=title, **kwargs);
        else:
            self.PIL().show();

    @staticmethod
    def Show(im, title=None, new_figure=True, axis=None, **kwargs):
        if (isinstance(im, Image)):
            imdata = im.pixels;
        else:
            imdata = im;

        if (new_figure):
            if (title is not None):
                plt.figure(num=title);
            else:
                plt.figure();
        if (axis is not None):
            axis.imshow(imdata, norm=matplotlib.colors.Normalize(vmin=0, vmax=255), **kwargs);
        else:
            plt.imshow(imdata, **kwargs);
        plt.axis('off');
        if (title):
            plt.title(title);

    def writeToFile(self, output_path=None, **kwargs):
        if (output_path is None):
            output_path = self.file_path;
        self.PIL().save(output_path, **kwargs);
        self.file_path = output_path;

    def __eq__(self, other):
        if (not isinstance(other, Image)):
            return NotImplemented;
        return np.array_equal(self.pixels, other.pixels);

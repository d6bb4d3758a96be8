import numpy as np

def vec(list):
    """Handy shorthand to make a single-precision float array."""
    return np.array(list, dtype=np.float32)

def length(v):
    """Return the Euclidean norm of the vector v."""
    return float(np.linalg.norm(v))

def normalize(v):
    """Return a unit vector in the direction of the vector v.

    The caller must not pass a zero vector.
    """
    return v / np.linalg.norm(v)


def rgb8(list):
    """Make a read-only 8-bit color from three channel values in [0, 255]."""
    channels = np.asarray(list)
    if channels.shape != (3,):
        raise ValueError(f"a color needs exactly 3 channels, got shape {channels.shape}")
    if not np.all(np.isfinite(channels)) or np.any(channels < 0) or np.any(channels > 255):
        raise ValueError(f"color channels must lie in [0, 255], got {list}")
    color = channels.astype(np.uint8)
    color.setflags(write=False)
    return color

def scale_color(color, intensity):
    """Scale each channel of an 8-bit color by a light intensity.

    Channels saturate at 0 and 255, and in-range values are truncated
    toward zero the same way a narrowing cast would.
    """
    scaled = np.asarray(color, dtype=np.float64) * intensity
    return np.clip(scaled, 0, 255).astype(np.uint8)

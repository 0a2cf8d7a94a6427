import numpy as np


def single_cell_stack(shape=(3, 3), cells=((1, 1), (0, 1)), value=1.0):
    """
    Stack with one occupied cell per time slice, zeros elsewhere.

    ``cells`` gives the (row, col) of the occupied cell in each slice. With
    default coordinates row 0 is the northernmost row.
    """
    values = np.zeros((len(cells),) + tuple(shape))
    for t, (row, col) in enumerate(cells):
        values[t, row, col] = value
    return values


def row_stack(n_cells=5, n_times=2, value=1.0):
    """Single-row stack of equal nonzero cells."""
    return np.full((n_times, 1, n_cells), value)


def random_stack(n_times=4, shape=(6, 8), missing=0.1, seed=0):
    """
    Abundance-like stack in [0, 1] with a few missing cells and a range
    that drifts north over time.
    """
    rng = np.random.default_rng(seed)
    nrow, ncol = shape
    rows = np.arange(nrow)[:, np.newaxis]
    values = np.empty((n_times, nrow, ncol))
    for t in range(n_times):
        centre = nrow - 1 - t * (nrow - 1) / max(n_times - 1, 1)
        suitability = np.exp(-((rows - centre) ** 2) / 4.0)
        values[t] = np.clip(suitability + rng.normal(0.0, 0.05, shape), 0.0, 1.0)
    values[rng.random(values.shape) < missing] = np.nan
    return values


def planar_coordinates(shape, spacing=1000.0, origin=(0.0, 0.0)):
    """Equal-area style (x, y) grids in metres, first row northernmost."""
    nrow, ncol = shape
    x = origin[0] + spacing * np.arange(ncol)
    y = origin[1] + spacing * np.arange(nrow - 1, -1, -1)
    return np.meshgrid(x, y)

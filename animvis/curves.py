"""
Path smoothing for sampled curves.

Paths are lists of commands:
    ("M", x, y)                      move to
    ("L", x, y)                      line to
    ("C", x1, y1, x2, y2, x, y)      cubic Bezier to (x, y)
"""


def basis_path(points):
    """
    Uniform cubic B-spline through ``points``.

    The curve starts at the first point and ends at the last one, but only
    approximates the points in between, which softens sampling steps.
    """
    commands = []
    x0 = y0 = x1 = y1 = None
    count = 0

    for x, y in points:
        if count == 0:
            commands.append(("M", x, y))
        elif count == 2:
            commands.append(("L", (5 * x0 + x1) / 6, (5 * y0 + y1) / 6))
            commands.append(_bezier(x0, y0, x1, y1, x, y))
        elif count > 2:
            commands.append(_bezier(x0, y0, x1, y1, x, y))
        count += 1
        x0, y0, x1, y1 = x1, y1, x, y

    # Close out the tail
    if count >= 3:
        commands.append(_bezier(x0, y0, x1, y1, x1, y1))
    if count >= 2:
        commands.append(("L", x1, y1))
    return commands


def _bezier(x0, y0, x1, y1, x, y):
    return (
        "C",
        (2 * x0 + x1) / 3, (2 * y0 + y1) / 3,
        (x0 + 2 * x1) / 3, (y0 + 2 * y1) / 3,
        (x0 + 4 * x1 + x) / 6, (y0 + 4 * y1 + y) / 6,
    )


def to_svg(commands):
    """Renders path commands as an SVG ``d`` attribute."""
    parts = []
    for op, *coords in commands:
        pairs = [f"{coords[i]:g},{coords[i + 1]:g}" for i in range(0, len(coords), 2)]
        parts.append(op + " ".join(pairs))
    return "".join(parts)

# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.

import numpy as np
import pytest

from hemesh.hds import Mesh


# Oblique box, all faces are oriented outwards.
BOX_POINTS = [
    [3.0, 1.0, 2.0],
    [8.0, 1.0, 2.0],
    [8.0, 4.0, 1.0],
    [3.0, 4.0, 1.0],
    [2.0, 2.5, 5.0],
    [7.0, 2.5, 5.0],
    [7.0, 5.5, 4.0],
    [2.0, 5.5, 4.0],
]

BOX_FACES = [
    [0, 1, 2, 3],
    [1, 0, 4, 5],
    [2, 1, 5, 6],
    [3, 2, 6, 7],
    [0, 3, 7, 4],
    [7, 6, 5, 4],
]


def grid_mesh(n=5):
    """ Triangulated n x n grid in the xy-plane.

    The vertex at grid position (x, y) has index ``x + n * y``, every
    square is split along the diagonal from (x, y) to (x + 1, y + 1).
    """
    points = [[x, y, 0.0] for y in range(n) for x in range(n)]
    faces = []

    for y in range(n - 1):
        for x in range(n - 1):
            a = x + n * y
            b = a + 1
            c = b + n
            d = a + n

            faces.append([a, b, c])
            faces.append([a, c, d])

    return Mesh(points, faces)


@pytest.fixture
def box_points():
    return [list(p) for p in BOX_POINTS]


@pytest.fixture
def box_faces():
    return [list(f) for f in BOX_FACES]


@pytest.fixture
def box(box_points, box_faces):
    return Mesh(box_points, box_faces)


@pytest.fixture
def triangle():
    return Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 2]])


@pytest.fixture
def two_triangles():
    points = [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]
    return Mesh(points, [[0, 1, 2], [0, 2, 3]])


@pytest.fixture
def grid():
    return grid_mesh()


@pytest.fixture
def fan_points():
    """ A center vertex and eight vertices around it.
    """
    return np.array([
        [2.0, 1.0, 3.0],
        [5.0, 1.0, 4.0],
        [4.5, 3.0, 1.5],
        [2.0, 5.0, 4.5],
        [0.0, 3.0, 2.5],
        [-1.0, 1.0, 3.5],
        [0.5, -1.0, 5.0],
        [2.0, -2.0, 2.0],
        [3.5, -1.0, 5.5],
    ])

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

import copy
import logging

import numpy as np
import pytest

from hemesh.hds import Mesh


class TestClean:

    def test_dense_indices(self, box):
        box.remove_vertex(4)
        box.clean()
        box._check()

        assert box.size == (7, 9, 3)
        assert box.points.shape == (7, 3)

        assert [v.index for v in box.vertices] == list(range(7))
        assert [h.index for h in box.halfedges] == list(range(18))
        assert [f.index for f in box.faces] == [0, 1, 2]
        assert (box._nv, box._nh, box._nf) == (7, 18, 3)

        # Former vertices 5, 6, 7 moved down by one.
        assert np.array_equal(box.get_vertex(4).point, [7, 2.5, 5])
        assert np.array_equal(box.get_vertex(6).point, [2, 5.5, 4])

        assert [[v.index for v in f] for f in box] == [
            [0, 1, 2, 3], [2, 1, 4, 5], [3, 2, 5, 6]]

    def test_indices_reused_after_clean(self, box):
        box.remove_face(box.get_face(0))
        box.clean()

        assert box.add_face(0, 1, 2, 3).index == 5
        box._check()

    def test_cull_isolated_vertex(self, box):
        box.add_vertex(0, 0, 0)

        box.clean(cull_isolated=False)
        box._check()

        assert box.vertex_count == 9

        box.clean()
        box._check()

        assert box.vertex_count == 8
        assert box.points.shape == (8, 3)

    def test_cull_dangling_edge(self, two_triangles):
        v = two_triangles.add_vertex(2, 2, 0)
        two_triangles.add_edge(2, v)

        two_triangles.clean(cull_isolated=False)
        two_triangles._check()

        assert two_triangles.size == (5, 6, 2)

        two_triangles.clean()
        two_triangles._check()

        assert two_triangles.size == (4, 5, 2)

    def test_cull_isolated_face(self, triangle):
        # A face without neighbors is isolated.
        triangle.clean()
        triangle._check()

        assert triangle.size == (0, 0, 0)
        assert triangle.points is None

    def test_keep_isolated_face(self, triangle):
        triangle.clean(cull_isolated=False)
        triangle._check()

        assert triangle.size == (3, 3, 1)

    def test_empty_mesh(self):
        mesh = Mesh()
        mesh.clean()
        mesh._check()

        assert mesh.size == (0, 0, 0)

    def test_logging(self, box, caplog):
        with caplog.at_level(logging.INFO, logger='hemesh.hds'):
            box.clean()

        assert 'cleaned mesh' in caplog.text


class TestCopy:

    def test_independent(self, box):
        other = box.copy()
        other._check()

        assert other.size == box.size
        assert other.get_vertex(0) is not box.get_vertex(0)
        assert other.get_vertex(0)._mesh is other

        other.remove_face(other.get_face(0))
        other.get_vertex(7).point = [0, 0, 0]

        box._check()

        assert box.size == (8, 12, 6)
        assert np.array_equal(box.get_vertex(7).point, [2, 5.5, 4])
        assert not any(v.boundary for v in box.vertices)

    def test_same_topology(self, box):
        other = box.copy()

        for h in box.halfedges:
            g = other.get_halfedge(h.index)

            assert g == h
            assert g.next.index == h.next.index
            assert g.prev.index == h.prev.index
            assert g.face.index == h.face.index

    def test_equality(self, box):
        other = box.copy()

        for a, b in zip(box.vertices, other.vertices):
            assert a == b and a is not b

        for a, b in zip(box.halfedges, other.halfedges):
            assert a == b and a is not b

        for a, b in zip(box.edges, other.edges):
            assert a == b

        for a, b in zip(box.faces, other.faces):
            assert a == b and a is not b

        assert box.get_face(0) != box.get_face(1)
        assert box.get_halfedge(0) != box.get_halfedge(1)
        assert box.get_edge(0) != box.get_edge(1)

        other.get_vertex(7).point = [0, 0, 0]

        assert other.get_vertex(7) != box.get_vertex(7)

    def test_equality_erased(self, box):
        a = box.copy()
        v = a.get_vertex(4)
        a.remove_vertex(v)

        b = box.copy()
        h = b.get_halfedge(0)
        e = b.get_edge(0)
        b.remove_edge(e)

        c = box.copy()
        f = c.get_face(0)
        c.remove_face(f)

        for mesh in (a, b, c):
            mesh._check()

        for item, twin in ((v, box.get_vertex(4)), (h, box.get_halfedge(0)),
                           (e, box.get_edge(0)), (f, box.get_face(0))):
            assert item.deleted
            assert item == item
            assert item != twin

    def test_counters(self, box):
        box.remove_vertex(4)
        other = box.copy()
        other._check()

        assert other.size == (7, 9, 3)
        assert other.add_vertex(0, 0, 0).index == 8
        assert other.try_get_vertex(4) is None

    def test_copy_module(self, box):
        other = copy.copy(box)
        other._check()

        assert other.size == box.size

        with pytest.raises(NotImplementedError):
            copy.deepcopy(box)

    def test_empty(self):
        other = Mesh().copy()

        assert other.size == (0, 0, 0)
        assert other.points is None

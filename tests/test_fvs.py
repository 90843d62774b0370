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

from hemesh.hds import Mesh, NonManifoldError


class TestToFaceVertex:

    def test_counts(self, box):
        fv = box.to_face_vertex()

        assert fv.size == box.size
        assert fv.vertex_count == 8
        assert fv.edge_count == 12
        assert fv.face_count == 6

    def test_edge_indices(self, box):
        fv = box.to_face_vertex()

        for h in box.halfedges:
            e = fv.get_edge(h.index // 2)

            assert {e.origin.index, e.target.index} == {
                h.origin.index, h.target.index}

        for e in box.edges:
            fe = fv.get_edge(e.index)

            assert fe.origin.index == e.origin.index
            assert fe.target.index == e.target.index

        assert fv.edge_between(0, 4).index == 4
        assert fv.edge_between(4, 0).index == 4
        assert fv.edge_between(0, 6) is None

    def test_faces(self, box):
        fv = box.to_face_vertex()

        assert [[v.index for v in f] for f in fv] == [
            [v.index for v in f] for f in box]

        f = fv.get_face(1)

        assert len(f) == 4
        assert [e.index for e in f.edges] == [0, 4, 5, 6]
        assert {g.index for g in f._fiter()} == {0, 2, 4, 5}

    def test_vertex_queries(self, box):
        fv = box.to_face_vertex()
        v = fv.get_vertex(0)

        assert v.degree == 3
        assert {w.index for w in v._viter()} == {1, 3, 4}
        assert {f.index for f in v._fiter()} == {0, 1, 4}
        assert np.array_equal(v.point, [3, 1, 2])

    def test_boundary(self, two_triangles):
        fv = two_triangles.to_face_vertex()

        assert sum(e.boundary for e in fv.edges) == 4
        assert not fv.edge_between(0, 2).boundary
        assert len(fv.edge_between(0, 2).faces) == 2
        assert all(v.boundary for v in fv.vertices)
        assert all(f.boundary for f in fv.faces)

    def test_lookup(self, box):
        fv = box.to_face_vertex()

        assert fv.try_get_vertex(8) is None
        assert fv.try_get_edge(12) is None
        assert fv.try_get_face(6) is None

        with pytest.raises(KeyError):
            fv.get_face(6)

    def test_source_unchanged(self, box):
        fv = box.to_face_vertex()
        fv.points[0] = 0

        box._check()

        assert np.array_equal(box.get_vertex(0).point, [3, 1, 2])

    def test_gaps_preserved(self, box):
        box.remove_vertex(4)
        fv = box.to_face_vertex()

        assert fv.size == (7, 9, 3)
        assert fv.try_get_vertex(4) is None
        assert fv.get_vertex(5).index == 5


class TestToHalfedge:

    def test_round_trip(self, box):
        other = box.to_face_vertex().to_halfedge()
        other._check()

        assert isinstance(other, Mesh)
        assert other.size == box.size
        assert other.halfedge_between(0, 4).index == 8
        assert other.halfedge_between(6, 2).index == 16

        assert [[v.index for v in f] for f in other] == [
            [v.index for v in f] for f in box]

        for h in box.halfedges:
            assert other.get_halfedge(h.index) == h

    def test_round_trip_boundary(self, two_triangles):
        other = two_triangles.to_face_vertex().to_halfedge()
        other._check()

        assert other.size == (4, 5, 2)
        assert all(v.boundary for v in other.vertices)
        assert other.halfedge_between(1, 0)._compute_loop_len() == 4

        # The converted mesh is fully functional.
        v = other.add_vertex(2, 0, 0)
        other.add_face(1, v, 2)
        other._check()

        assert other.size == (5, 7, 3)

    def test_round_trip_with_gaps(self, box):
        box.remove_vertex(4)
        other = box.to_face_vertex().to_halfedge()
        other._check()

        assert other.size == (7, 9, 3)
        assert other.try_get_vertex(4) is None
        assert other.add_vertex(0, 0, 0).index == 8

    def test_non_manifold_vertex(self):
        points = [[0, 0, 0], [1, 0, 0], [0, 1, 0], [-1, 0, 0], [0, -1, 0]]
        mesh = Mesh(points, [[0, 1, 2], [0, 3, 4]])

        other = mesh.to_face_vertex().to_halfedge()
        other._check()

        assert other.get_vertex(0).degree == 4
        assert not other.get_vertex(0)._manifold

    def test_dangling_edge(self, triangle):
        v = triangle.add_vertex(1, 1, 0)
        triangle.add_edge(0, v)

        fv = triangle.to_face_vertex()

        assert fv.get_vertex(3).degree == 1
        assert fv.edge_between(0, 3).boundary

        with pytest.raises(NonManifoldError):
            fv.to_halfedge()

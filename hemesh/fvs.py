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

""" Face-vertex data structure.

Explicit incidence lists: a vertex knows its edges, an edge knows its
end vertices and adjacent faces, a face knows its vertices and edges in
cyclic order. Meshes of this type are obtained from a halfedge mesh by
:meth:`hemesh.hds.Mesh.to_face_vertex` and converted back by
:meth:`Mesh.to_halfedge`. They are not meant to be edited.
"""

import logging

import hemesh.hds as hds


logger = logging.getLogger(__name__)


class Mesh:
    """ Face-vertex mesh.

    Vertex, edge, and face indices are the ones of the halfedge mesh the
    instance was converted from.
    """

    def __init__(self):
        self._points = None

        self._verts = dict()
        self._edges = dict()
        self._faces = dict()

        # Maps unordered pairs of vertex indices to edge indices.
        self._emap = dict()

        self._nv = 0
        self._ne = 0
        self._nf = 0

    def __repr__(self):
        return (f'Mesh(vertices={len(self._verts)}, '
                f'edges={len(self._edges)}, faces={len(self._faces)})')

    def __iter__(self):
        """ Face iterator in order of ascending face indices.
        """
        return self._fiter()

    @property
    def points(self):
        """ Vertex coordinate array.

        :type: ~numpy.ndarray or None
        """
        return self._points

    @property
    def vertices(self):
        """ Vertex list.

        :type: list[Vertex]
        """
        return list(self._verts.values())

    @property
    def edges(self):
        """ Edge list.

        :type: list[Edge]
        """
        return list(self._edges.values())

    @property
    def faces(self):
        """ Face list.

        :type: list[Face]
        """
        return list(self._faces.values())

    @property
    def vertex_count(self):
        return len(self._verts)

    @property
    def edge_count(self):
        return len(self._edges)

    @property
    def face_count(self):
        return len(self._faces)

    @property
    def size(self):
        """ Mesh size :math:`(v, e, f)`.

        :type: (int, int, int)
        """
        return self.vertex_count, self.edge_count, self.face_count

    def get_vertex(self, index):
        return self._verts[index]

    def try_get_vertex(self, index):
        return self._verts.get(index)

    def get_edge(self, index):
        return self._edges[index]

    def try_get_edge(self, index):
        return self._edges.get(index)

    def get_face(self, index):
        return self._faces[index]

    def try_get_face(self, index):
        return self._faces.get(index)

    def edge_between(self, v1, v2):
        """ Edge lookup by vertices.

        Returns
        -------
        Edge or None
            The edge connecting `v1` and `v2` (in any direction).
        """
        i, j = int(v1), int(v2)
        index = self._emap.get((min(i, j), max(i, j)))

        if index is None:
            return None

        return self._edges[index]

    def to_halfedge(self):
        """ Halfedge representation.

        Inverse of :meth:`hemesh.hds.Mesh.to_face_vertex`. Vertex and face
        indices are kept, edge ``i`` becomes the halfedge pair ``2 * i``
        and ``2 * i + 1`` with halfedge ``2 * i`` pointing from the start
        to the end vertex of the edge.

        Raises
        ------
        NonManifoldError
            If an edge has no adjacent face (a dangling edge cannot be
            linked into a boundary loop), or if two faces traverse an
            edge in the same direction.

        Returns
        -------
        hemesh.hds.Mesh
            Independent halfedge mesh.
        """
        mesh = hds.Mesh()

        if self._points is not None:
            mesh._points = self._points.copy()

        for i in self._verts:
            mesh._verts[i] = hds.Vertex(i, mesh)

        for i, e in self._edges.items():
            if not e._faces:
                msg = f'edge ({e._start}, {e._end}) has no adjacent face'
                raise hds.NonManifoldError(msg)

            mesh._halfs[2 * i] = hds.Halfedge(2 * i, mesh, e._start)
            mesh._halfs[2 * i + 1] = hds.Halfedge(2 * i + 1, mesh, e._end)

            mesh._hmap[e._start, e._end] = 2 * i
            mesh._hmap[e._end, e._start] = 2 * i + 1

        # Inner halfedge loops.
        for i, f in self._faces.items():
            face = hds.Face(i, mesh)
            loop = []

            for v, e in zip(f._verts, f._edges):
                h = mesh._halfs[2 * e if self._edges[e]._start == v
                                else 2 * e + 1]

                if h._face is not None:
                    msg = f'face #{i} has inconsistent orientation'
                    raise hds.NonManifoldError(msg)

                h._face = i
                loop.append(h)

                if mesh._verts[v]._h is None:
                    mesh._verts[v]._h = h._idx

            for k in range(len(loop)):
                mesh._link(loop[k - 1], loop[k])

            face._h = loop[0]._idx
            mesh._faces[i] = face

        # Outer halfedge loops. Boundary halfedges that end at the same
        # vertex are collected first, such a vertex is non-manifold if
        # there is more than one of them.
        incoming = dict()

        for h in mesh._halfs.values():
            if h._face is None:
                incoming.setdefault(h.target._idx, []).append(h)

        for v, halfs in incoming.items():
            # The outgoing boundary halfedge of the fan an incoming
            # boundary halfedge belongs to.
            outgoing = []

            for h in halfs:
                g = h.pair

                while g._face is not None:
                    g = g.prev.pair

                outgoing.append(g)

            # Fans are chained in the order they were found.
            for h, g in zip(halfs, outgoing[1:] + outgoing[:1]):
                mesh._link(h, g)

            if len(halfs) > 1:
                logger.debug('vertex #%d has %d fans', v, len(halfs))

            mesh._verts[v]._h = outgoing[0]._idx

        mesh._nv = self._nv
        mesh._nh = 2 * self._ne
        mesh._nf = self._nf

        return mesh

    def _add_vertex(self, index):
        self._verts[index] = Vertex(index, self)

    def _add_edge(self, index, start, end):
        self._edges[index] = Edge(index, self, start, end)
        self._emap[min(start, end), max(start, end)] = index

        self._verts[start]._edges.append(index)
        self._verts[end]._edges.append(index)

    def _add_face(self, index, verts, edges):
        assert len(verts) == len(edges)

        self._faces[index] = Face(index, self, verts, edges)

        for e in edges:
            self._edges[e]._faces.append(index)

    def _viter(self):
        return iter(self._verts.values())

    def _eiter(self):
        return iter(self._edges.values())

    def _fiter(self):
        return iter(self._faces.values())


class Vertex:
    """ Face-vertex mesh vertex.

    Parameters
    ----------
    index : int
        Vertex index.
    mesh : Mesh
        The parent mesh object.
    """

    def __init__(self, index, mesh):
        self._idx = index
        self._mesh = mesh
        self._edges = []

    def __repr__(self):
        return f'Vertex({self._idx})'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __eq__(self, other):
        if not isinstance(other, Vertex):
            return NotImplemented

        return self._idx == other._idx and self._edges == other._edges

    def __hash__(self):
        return hash(self._idx)

    @property
    def index(self):
        """ Vertex index.

        :type: int
        """
        return self._idx

    @property
    def point(self):
        """ Vertex coordinates, view of the coordinate array.

        :type: ~numpy.ndarray
        """
        return self._mesh._points[self._idx, ...]

    @property
    def edges(self):
        """ Connected edges.

        :type: list[Edge]
        """
        return list(self._eiter())

    @property
    def degree(self):
        """ Number of connected edges.

        :type: int
        """
        return len(self._edges)

    @property
    def isolated(self):
        """ Topological state, :obj:`True` without connected edges.

        :type: bool
        """
        return not self._edges

    @property
    def boundary(self):
        """ Topological state.

        Isolated vertices and vertices with a connected boundary edge are
        boundary vertices.

        :type: bool
        """
        return self.isolated or any(e.boundary for e in self._eiter())

    def _viter(self):
        """ Adjacent vertex iterator.
        """
        for e in self._eiter():
            yield e.target if e._start == self._idx else e.origin

    def _eiter(self):
        return (self._mesh._edges[e] for e in self._edges)

    def _fiter(self):
        """ Adjacent face iterator, each face is visited once.
        """
        faces = dict.fromkeys(f for e in self._eiter() for f in e._faces)
        return (self._mesh._faces[f] for f in faces)


class Edge:
    """ Face-vertex mesh edge.

    Parameters
    ----------
    index : int
        Edge index.
    mesh : Mesh
        The parent mesh object.
    start : int
        Start vertex index.
    end : int
        End vertex index.
    """

    def __init__(self, index, mesh, start, end):
        self._idx = index
        self._mesh = mesh
        self._start = start
        self._end = end
        self._faces = []

    def __repr__(self):
        return f'Edge({self._idx})'

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented

        return (self._idx == other._idx and self._start == other._start
                and self._end == other._end)

    def __hash__(self):
        return hash(self._idx)

    def __iter__(self):
        yield self.origin
        yield self.target

    @property
    def index(self):
        """ Edge index.

        :type: int
        """
        return self._idx

    @property
    def origin(self):
        """ Start vertex.

        :type: Vertex
        """
        return self._mesh._verts[self._start]

    @property
    def target(self):
        """ End vertex.

        :type: Vertex
        """
        return self._mesh._verts[self._end]

    @property
    def faces(self):
        """ Adjacent faces.

        :type: list[Face]
        """
        return list(self._fiter())

    @property
    def boundary(self):
        """ Topological state.

        An edge with less than two adjacent faces is a boundary edge.

        :type: bool
        """
        return len(self._faces) < 2

    def _viter(self):
        return iter(self)

    def _fiter(self):
        return (self._mesh._faces[f] for f in self._faces)


class Face:
    """ Face-vertex mesh face.

    Parameters
    ----------
    index : int
        Face index.
    mesh : Mesh
        The parent mesh object.
    verts : list[int]
        Vertex indices in cyclic order.
    edges : list[int]
        Edge indices, edge ``k`` connects vertex ``k`` and ``k + 1``.
    """

    def __init__(self, index, mesh, verts, edges):
        self._idx = index
        self._mesh = mesh
        self._verts = list(verts)
        self._edges = list(edges)

    def __repr__(self):
        return f'Face({self._idx})'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __len__(self):
        return len(self._verts)

    def __eq__(self, other):
        if not isinstance(other, Face):
            return NotImplemented

        return self._idx == other._idx and self._verts == other._verts

    def __hash__(self):
        return hash(self._idx)

    def __iter__(self):
        """ Vertex iterator in cyclic order.
        """
        return self._viter()

    @property
    def index(self):
        """ Face index.

        :type: int
        """
        return self._idx

    @property
    def vertices(self):
        """ Face vertices in cyclic order.

        :type: list[Vertex]
        """
        return list(self._viter())

    @property
    def edges(self):
        """ Face edges in cyclic order.

        :type: list[Edge]
        """
        return list(self._eiter())

    @property
    def boundary(self):
        """ Topological state, :obj:`True` if an edge is a boundary edge.

        :type: bool
        """
        return any(e.boundary for e in self._eiter())

    def _viter(self):
        return (self._mesh._verts[v] for v in self._verts)

    def _eiter(self):
        return (self._mesh._edges[e] for e in self._edges)

    def _fiter(self):
        """ Edge-adjacent face iterator.
        """
        for e in self._eiter():
            for f in e._faces:
                if f != self._idx:
                    yield self._mesh._faces[f]

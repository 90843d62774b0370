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

""" Halfedge data structure.

A polyhedral mesh (with or without boundary) is described by three
containers:

    - a dictionary of :class:`Vertex` objects,
    - a dictionary of :class:`Halfedge` objects,
    - and a dictionary of :class:`Face` objects.

All three containers map integer indices to mesh items and are managed
by the :class:`Mesh` class. Mesh items never reference each other
directly, they store integer handles that are resolved by the parent
mesh. Halfedges are created in pairs with indices ``2 * i`` and
``2 * i + 1``, the pair of the halfedge with index ``k`` therefore has
index ``k ^ 1``. An :class:`Edge` is a light-weight view of such a pair.

Indices are stable under insertion and deletion of mesh items. Only a
call to :meth:`Mesh.clean` renumbers the items of a mesh.

Note
----
To ease debugging, this module relies on assertions which can slow down
script execution. You can disable assertions by running in optimized mode
via the "-O" command line argument.
"""

import logging
from copy import copy

import numpy as np


logger = logging.getLogger(__name__)


def _array_append(array, item):
    """ Resize and append to array.

    Parameters
    ----------
    array : ~numpy.ndarray or None
        Array object to be augmented. A new array of shape
        ``(1, *item.shape)`` will be created if :obj:`None`.
    item : array_like
        Item to be added as new element of the first axis. The
        shapes ``array.shape[1:]`` and ``item.shape`` have to agree.

    Raises
    ------
    ValueError
        In case of dimension mismatch.

    Returns
    -------
    ~numpy.ndarray
        Reference to the enlarged array. This is a new array if the
        input array argument was :obj:`None`.
    """
    if isinstance(array, np.ndarray):
        if array.shape[1:] != np.shape(item):
            msg = f'cannot add item with shape {np.shape(item)}'
            raise ValueError(msg)

        arr_shape = list(array.shape)
        arr_shape[0] += 1

        array.resize(arr_shape, refcheck=False)
    else:
        array = np.empty((1, *np.shape(item)))

    # Assign to the 'free' space at the end of the extended array.
    array[-1, ...] = item

    return array


class Mesh:
    """ Mesh kernel.

    The combinatorics of a mesh are built incrementally by adding
    vertices and faces, or by converting a sequence of vertex coordinates
    and a sequence of face definitions to its halfedge representation.

    Parameters
    ----------
    points : array_like, optional
        Vertex coordinates, one row per vertex. The mesh keeps its own
        copy of the coordinate data.
    faces : array_like, optional
        Face definitions, 0-based vertex indexing.

    Raises
    ------
    NonManifoldError
        When trying to initialize a mesh from data with non-manifold
        edges.
    ValueError
        If face definitions are given without vertex coordinates.

    Note
    ----
    Non-manifold vertices (vertices with more than one boundary fan of
    faces) are tolerated but reported as a warning through the module
    logger, the same holds for isolated vertices.
    """

    def __init__(self, points=None, faces=None):
        if points is None and faces is not None:
            msg = "face definitions require 'points' argument != None"
            raise ValueError(msg)

        self._points = None

        # Index to item maps. Dictionaries preserve insertion order which
        # coincides with ascending index order.
        self._verts = dict()
        self._halfs = dict()
        self._faces = dict()

        # A dictionary that maps pairs of vertex indices to halfedge
        # indices. Useful and efficient for checking if vertices are
        # adjacent.
        self._hmap = dict()

        # Next free vertex, halfedge, and face index.
        self._nv = 0
        self._nh = 0
        self._nf = 0

        if points is not None:
            points = np.array(points, dtype=float)

            if points.ndim != 2:
                raise ValueError('points must be a two-dimensional array')

            if len(points):
                self._points = points

            for i in range(len(points)):
                self._verts[i] = Vertex(i, self)

            self._nv = len(points)

        if faces is not None:
            for face in faces:
                self.add_face(face)

        # Typically one does not expect isolated vertices in a mesh.
        isolated = [v._idx for v in self._verts.values() if v.isolated]

        if isolated:
            logger.warning('there are %d isolated vertices', len(isolated))

        for v in self._verts.values():
            if not v._manifold:
                logger.warning('vertex #%d is non-manifold', v._idx)

    def __repr__(self):
        return (f'Mesh(vertices={len(self._verts)}, '
                f'edges={len(self._halfs) // 2}, faces={len(self._faces)})')

    def __iter__(self):
        """ Face iterator.

        The returned iterator visits all faces of a mesh in order of
        ascending face indices.

        Yields
        ------
        Face
            Next face in index order traversal.
        """
        return self._fiter()

    def __copy__(self):
        """ Shallow mesh copy.

        Duplicate the mesh combinatorics and vertex coordinates. Equivalent
        to :meth:`copy` method.

        Returns
        -------
        Mesh
            Copy of the mesh.
        """
        return self.copy()

    def __deepcopy__(self, *args):
        """ Reserved for future use.

        Use :meth:`copy` to copy a halfedge mesh.
        """
        raise NotImplementedError('use .copy() instead')

    def __bool__(self):
        return True

    @property
    def points(self):
        """ Vertex coordinate array.

        Direct read and write access to vertex coordinates. Row ``i``
        holds the coordinates of the vertex with index ``i``.

        :type: ~numpy.ndarray or None

        Note
        ----
        The vertex coordinate array contains coordinate entries of erased
        vertices. Calling :meth:`clean` removes those entries.
        """
        return self._points

    @property
    def vertices(self):
        """ Vertex list.

        Snapshot of all vertices in order of ascending indices.

        :type: list[Vertex]
        """
        return list(self._verts.values())

    @property
    def halfedges(self):
        """ Halfedge list.

        Snapshot of all halfedges in order of ascending indices. A pair
        of halfedges occupies two consecutive positions.

        :type: list[Halfedge]
        """
        return list(self._halfs.values())

    @property
    def edges(self):
        """ Edge list.

        One :class:`Edge` view for each pair of halfedges.

        :type: list[Edge]
        """
        return list(self._eiter())

    @property
    def faces(self):
        """ Face list.

        Snapshot of all faces in order of ascending indices. The
        corresponding face definitions can be generated with a list
        comprehension:

        >>> faces = [[int(v) for v in f] for f in mesh]

        :type: list[Face]
        """
        return list(self._faces.values())

    @property
    def vertex_count(self):
        """ Number of vertices.

        :type: int
        """
        return len(self._verts)

    @property
    def halfedge_count(self):
        """ Number of halfedges.

        :type: int
        """
        return len(self._halfs)

    @property
    def edge_count(self):
        """ Number of edges.

        :type: int
        """
        assert len(self._halfs) % 2 == 0
        return len(self._halfs) // 2

    @property
    def face_count(self):
        """ Number of faces.

        :type: int
        """
        return len(self._faces)

    @property
    def size(self):
        """ Mesh size.

        The attribute value :math:`(v, e, f)` holds the number of
        vertices, the number of edges, and the number of faces.

        :type: (int, int, int)
        """
        return self.vertex_count, self.edge_count, self.face_count

    def clear(self):
        """ Clear all mesh items.

        All items are invalidated and the index counters are reset. The
        memory occupied by the coordinate array is garbage collected
        once no further references or views of it remain.
        """
        for items in (self._verts, self._halfs, self._faces):
            for item in items.values():
                item._invalidate()

            items.clear()

        self._hmap.clear()
        self._points = None
        self._nv = self._nh = self._nf = 0

    # Vertices ------------------------------------------------------------

    def add_vertex(self, point, *args):
        """ Create and add new vertex.

        The first point added to a mesh determines the dimensionality
        of all mesh vertices.

        Parameters
        ----------
        point : array_like or float
            Vertex coordinates.
        *args
            Variable number of scalars.

        Raises
        ------
        ValueError
            If `point` has the wrong shape.

        Returns
        -------
        Vertex
            The newly created :class:`Vertex` instance.
        """
        # Append to (or create) the array of all vertex coordinates. Row
        # indices and vertex indices agree since erased vertices keep
        # their coordinate row until the next call to clean().
        point = [point, *args] if len(args) else point
        self._points = _array_append(self._points, point)

        assert len(self._points) == self._nv + 1

        v = Vertex(self._nv, self)

        self._verts[v._idx] = v
        self._nv += 1

        return v

    def get_vertex(self, index):
        """ Vertex lookup.

        Parameters
        ----------
        index : int
            Vertex index.

        Raises
        ------
        KeyError
            If there is no vertex with the given index.

        Returns
        -------
        Vertex
        """
        return self._verts[index]

    def try_get_vertex(self, index):
        """ Vertex lookup, :obj:`None` if there is no such vertex.
        """
        return self._verts.get(index)

    def remove_vertex(self, vertex):
        """ Remove vertex and its neighborhood.

        All faces adjacent to `vertex` are removed first (see
        :meth:`remove_face`), followed by any remaining edges. Vertices
        that become disconnected in the process are erased, including
        `vertex` itself.

        Parameters
        ----------
        vertex : Vertex or int
            The vertex to be removed.
        """
        v = self._vertex(vertex)

        for f in list(v._fiter()):
            self.remove_face(f)

        # Only dangling edges are left at this point.
        while not v.deleted and v._h is not None:
            self.remove_halfedge(v.halfedge)

        if not v.deleted:
            self.erase_vertex(v)

    def erase_vertex(self, vertex):
        """ Erase disconnected vertex.

        Parameters
        ----------
        vertex : Vertex or int
            The vertex to be erased.

        Raises
        ------
        ValueError
            If `vertex` is still connected to other mesh items.

        Note
        ----
        The coordinate row of an erased vertex is kept in :attr:`points`
        until :meth:`clean` is called.
        """
        v = self._vertex(vertex)

        if v._h is not None:
            msg = f'vertex #{v._idx} is still connected'
            raise ValueError(msg)

        del self._verts[v._idx]
        v._invalidate()

    # Halfedges -----------------------------------------------------------

    def add_pair(self, start, end):
        """ Create a pair of halfedges.

        Parameters
        ----------
        start : Vertex or int
            Origin of the returned halfedge.
        end : Vertex or int
            Target of the returned halfedge.

        Returns
        -------
        Halfedge or None
            The halfedge from `start` to `end`, its pair has the next
            higher index. :obj:`None` if `start` and `end` coincide or
            if the two vertices are already connected.

        Note
        ----
        Successor, predecessor, and face of the new halfedges are not
        set. Linking them into the mesh is the responsibility of the
        caller, neighborhood traversal is undefined until this is done.
        Use :meth:`add_edge` to create a linked edge. Unlinked pairs are
        rejected by :meth:`add_face`.
        """
        v = self._vertex(start)
        w = self._vertex(end)

        if v is w or (v._idx, w._idx) in self._hmap:
            return None

        h = Halfedge(self._nh, self, v._idx)
        p = Halfedge(self._nh + 1, self, w._idx)

        self._halfs[h._idx] = h
        self._halfs[p._idx] = p

        self._hmap[v._idx, w._idx] = h._idx
        self._hmap[w._idx, v._idx] = p._idx

        self._nh += 2

        return h

    def get_halfedge(self, index):
        """ Halfedge lookup.

        Raises
        ------
        KeyError
            If there is no halfedge with the given index.
        """
        return self._halfs[index]

    def try_get_halfedge(self, index):
        """ Halfedge lookup, :obj:`None` if there is no such halfedge.
        """
        return self._halfs.get(index)

    def halfedge_between(self, start, end):
        """ Halfedge lookup by vertices.

        Parameters
        ----------
        start : Vertex or int
            Origin vertex.
        end : Vertex or int
            Target vertex.

        Returns
        -------
        Halfedge or None
            The halfedge from `start` to `end` if the two vertices are
            adjacent.
        """
        index = self._hmap.get((int(start), int(end)))

        if index is None:
            return None

        return self._halfs[index]

    def remove_halfedge(self, halfedge):
        """ Remove halfedge pair and adjacent faces.

        If neither `halfedge` nor its pair has an adjacent face the pair
        is erased together with every endpoint left disconnected.
        Otherwise the adjacent faces are removed via :meth:`remove_face`
        which takes care of the edge.

        Parameters
        ----------
        halfedge : Halfedge
            One of the two halfedges of the pair.
        """
        assert not halfedge.deleted

        h = halfedge
        p = h.pair

        if h._face is None and p._face is None:
            v = h.origin
            w = h.target

            self.erase_halfedge(h)

            for u in (v, w):
                if u._h is None:
                    self.erase_vertex(u)
        else:
            for f in (h.face, p.face):
                if f is not None and not f.deleted:
                    self.remove_face(f)

    def erase_halfedge(self, halfedge):
        """ Erase halfedge pair.

        Unconditional local surgery: the neighbors of `halfedge` and its
        pair are linked to bypass the erased pair, the outgoing halfedges
        of both endpoints are updated, and adjacent faces are erased.
        Endpoints are kept, even if they become disconnected.

        Parameters
        ----------
        halfedge : Halfedge
            One of the two halfedges of the pair.
        """
        assert not halfedge.deleted

        h = halfedge
        p = h.pair
        v = h.origin
        w = p.origin

        # A pair that was never linked (see add_pair) is simply dropped.
        if h._next is not None:
            hp, hn = h.prev, h.next
            pp, pn = p.prev, p.next

            # Bypass the pair in both halfedge loops it belongs to.
            self._link(hp, pn)
            self._link(pp, hn)

            if v._h == h._idx:
                v._h = None if hp is p else pn._idx

            if w._h == p._idx:
                w._h = None if pp is h else hn._idx

            # Adjacent faces are merged into one loop that starts at the
            # successor of the halfedge that bounded a face.
            f, g = h.face, p.face

            if f is not None:
                self._erase_face_loop(f, hn)

                if g is not None and g is not f:
                    self._pop_face(g)
            elif g is not None:
                self._erase_face_loop(g, pn)

        for k in (h, p):
            del self._halfs[k._idx]

        del self._hmap[v._idx, w._idx]
        del self._hmap[w._idx, v._idx]

        h._invalidate()
        p._invalidate()

        self._adjust_outgoing(v)
        self._adjust_outgoing(w)

    # Edges ---------------------------------------------------------------

    def add_edge(self, start, end):
        """ Create and add new edge.

        The new edge is not incident to any face. It is linked into the
        boundary loops of its endpoints.

        Parameters
        ----------
        start : Vertex or int
            Origin of the edge.
        end : Vertex or int
            Target of the edge.

        Raises
        ------
        NonManifoldError
            If one of the endpoints is an interior vertex.

        Returns
        -------
        Edge or None
            The new edge, or :obj:`None` if `start` and `end` coincide or
            are already connected.
        """
        v = self._vertex(start)
        w = self._vertex(end)

        for u in (v, w):
            if not u.boundary:
                raise NonManifoldError(f'vertex #{u._idx} is interior')

        h = self.add_pair(v, w)

        if h is None:
            return None

        p = h.pair

        # The halfedge a leaves vertex u, the halfedge b arrives at u.
        for a, b, u in ((h, p, v), (p, h, w)):
            if u._h is None:
                self._link(b, a)
                u._h = a._idx
            else:
                r = u.halfedge

                self._link(r.prev, a)
                self._link(b, r)

        return Edge(h)

    def get_edge(self, index):
        """ Edge lookup.

        The edge with index ``i`` is formed by the halfedges with
        indices ``2 * i`` and ``2 * i + 1``.

        Raises
        ------
        KeyError
            If there is no edge with the given index.
        """
        return Edge(self._halfs[2 * index])

    def try_get_edge(self, index):
        """ Edge lookup, :obj:`None` if there is no such edge.
        """
        h = self._halfs.get(2 * index)

        if h is None:
            return None

        return Edge(h)

    def edge_between(self, v1, v2):
        """ Edge lookup by vertices.

        Returns
        -------
        Edge or None
            The edge connecting `v1` and `v2` (in any direction).
        """
        h = self.halfedge_between(v1, v2)

        if h is None:
            return None

        return Edge(h)

    def remove_edge(self, edge):
        """ Remove edge and adjacent faces, see :meth:`remove_halfedge`.
        """
        self.remove_halfedge(edge.halfedge)

    def erase_edge(self, edge):
        """ Erase edge, see :meth:`erase_halfedge`.
        """
        self.erase_halfedge(edge.halfedge)

    # Faces ---------------------------------------------------------------

    def add_face(self, face, *args):
        """ Create and add new face.

        Vertex identifiers used in the definition of a face have to
        refer to existing vertices of the mesh. All preconditions are
        tested before the mesh is modified, a failing call leaves the
        mesh unchanged.

        Parameters
        ----------
        face : list[int] or list[Vertex]
            Combinatorial face definition.
        *args
            Variable number of :class:`Vertex` or :class:`int` arguments.

        Raises
        ------
        NonManifoldError
            If a face vertex is not a boundary vertex, if an edge of the
            face already has two adjacent faces, or if the boundary loop
            at a vertex cannot be re-linked.
        KeyError
            If the given vertex indices do not exist.
        ValueError
            If the given arguments do not define a valid face, or if an
            edge of the face was created by :meth:`add_pair` and never
            linked.

        Returns
        -------
        Face
            The newly created :class:`Face` instance.
        """
        face = [face, *args] if len(args) else face
        verts = [self._vertex(item) for item in face]
        n = len(verts)

        # Check for degeneracies: All vertices have to be topologically
        # different. If this test is passed there still need to be at
        # least three vertices. Duplicate coordinates are not a problem.
        if len({v._idx for v in verts}) != n:
            raise ValueError('face contains duplicate vertices')

        if n < 3:
            raise ValueError('face has less than three vertices')

        for v in verts:
            if not v.boundary:
                raise NonManifoldError(f'vertex #{v._idx} is interior')

        # Halfedge loop of the new face. Entry k connects vertex k with
        # vertex k + 1, missing halfedges are marked by None.
        loop = []

        for k in range(n):
            v = verts[k]
            w = verts[(k + 1) % n]
            h = self.halfedge_between(v, w)

            if h is not None and h._face is not None:
                msg = f'edge ({v._idx}, {w._idx}) is non-manifold'
                raise NonManifoldError(msg)

            # Pairs created by add_pair have no place in a boundary loop.
            if h is not None and h._next is None:
                msg = f'halfedge ({v._idx}, {w._idx}) is not linked'
                raise ValueError(msg)

            loop.append(h)

        # Vertices where both face halfedges exist but are not consecutive
        # in the boundary loop. The halfedges in between have to be moved
        # to another gap of the vertex.
        gaps = dict()

        for k in range(n):
            h_in, h_out = loop[k - 1], loop[k]

            if h_in is not None and h_out is not None:
                if h_in._next != h_out._idx:
                    gaps[k] = self._find_gap(h_in, h_out)

        # All tests passed. Create missing halfedges and claim all
        # halfedges of the loop for the new face.
        f = Face(self._nf, self)
        created = [h is None for h in loop]

        for k in range(n):
            if created[k]:
                loop[k] = self.add_pair(verts[k], verts[(k + 1) % n])

        for h in loop:
            h._face = f._idx

        # Only links of halfedges that end or start at vertex k are
        # modified when processing vertex k.
        for k in range(n):
            v = verts[k]
            h_in, h_out = loop[k - 1], loop[k]

            if created[k - 1] or created[k]:
                if not created[k]:
                    inc, out = h_out.prev, h_in.pair
                elif not created[k - 1]:
                    inc, out = h_out.pair, h_in.next
                elif v._h is None:
                    inc, out = h_out.pair, h_in.pair
                else:
                    # Vertex with an existing fan, the new face becomes
                    # a separate fan in front of the outgoing halfedge.
                    rep = v.halfedge

                    self._link(rep.prev, h_in.pair)
                    inc, out = h_out.pair, rep

                self._link(inc, out)
                self._link(h_in, h_out)

                v._h = out._idx
            elif k in gaps:
                g = gaps[k]
                start, end = h_in.next, h_out.prev

                logger.debug('re-linking boundary loop at vertex #%d',
                             v._idx)

                self._link(end, g.next)
                self._link(g, start)
                self._link(h_in, h_out)

        for v in verts:
            self._adjust_outgoing(v)

        f._h = loop[0]._idx

        self._faces[f._idx] = f
        self._nf += 1

        return f

    def get_face(self, index):
        """ Face lookup.

        Raises
        ------
        KeyError
            If there is no face with the given index.
        """
        return self._faces[index]

    def try_get_face(self, index):
        """ Face lookup, :obj:`None` if there is no such face.
        """
        return self._faces.get(index)

    def remove_face(self, face):
        """ Remove face and clean up its neighborhood.

        Edges of `face` that are not adjacent to another face are erased.
        Vertices of `face` that become disconnected are erased as well.

        Parameters
        ----------
        face : Face
            The face to be removed.
        """
        assert not face.deleted

        verts = list(face._viter())
        halfs = list(face._hiter())

        for h in halfs:
            h._face = None

            if h.pair._face is None:
                self.erase_halfedge(h)
            else:
                v = h.origin

                if v.halfedge._face is not None:
                    v._h = h._idx

        for v in verts:
            if v._h is None:
                self.erase_vertex(v)
            else:
                self._adjust_outgoing(v)

        self._pop_face(face)

    def erase_face(self, face):
        """ Erase face.

        The halfedges of `face` become boundary halfedges, no other
        mesh item is removed.

        Parameters
        ----------
        face : Face
            The face to be erased.
        """
        assert not face.deleted

        self._erase_face_loop(face, face.halfedge)

    # Maintenance ---------------------------------------------------------

    def clean(self, cull_isolated=True):
        """ Garbage collection.

        Renumbers all mesh items to occupy dense index ranges (keeping
        their relative order) and resets the index counters. The vertex
        coordinate array is compressed accordingly.

        Parameters
        ----------
        cull_isolated : bool, optional
            Remove isolated items first: faces without edge-adjacent
            face, edges without adjacent face, and disconnected vertices
            (in that order).

        Note
        ----
        Previously obtained indices and :class:`Edge` views become
        invalid.
        """
        if cull_isolated:
            for f in [f for f in self._fiter() if next(f._fiter(), None)
                      is None]:
                self.remove_face(f)

            for h in [h for h in self._halfs.values() if h._idx % 2 == 0
                      and h._face is None and h.pair._face is None]:
                self.remove_halfedge(h)

            for v in [v for v in self._verts.values() if v._h is None]:
                self.erase_vertex(v)

        verts = [self._verts[i] for i in sorted(self._verts)]
        halfs = [self._halfs[i] for i in sorted(self._halfs)]
        faces = [self._faces[i] for i in sorted(self._faces)]

        vmap = {v._idx: i for i, v in enumerate(verts)}
        hmap = {h._idx: i for i, h in enumerate(halfs)}
        fmap = {f._idx: i for i, f in enumerate(faces)}

        # Pairs are created and erased together, sorting preserves the
        # even/odd layout of pair indices.
        assert all(hmap[h._idx] ^ 1 == hmap[h._idx ^ 1] for h in halfs)

        def remap(table, index):
            return None if index is None else table[index]

        # Move the coordinates of live vertices to the front of the point
        # array, preserving their relative order. Then compress the array
        # by in-place resizing.
        vidx = [v._idx for v in verts]

        if vidx:
            shape = list(self._points.shape)
            shape[0] = len(vidx)

            self._points[:len(vidx), ...] = self._points[vidx, ...]
            self._points.resize(shape, refcheck=False)
        else:
            self._points = None

        for v in verts:
            v._idx = vmap[v._idx]
            v._h = remap(hmap, v._h)

        for h in halfs:
            h._idx = hmap[h._idx]
            h._origin = vmap[h._origin]
            h._next = remap(hmap, h._next)
            h._prev = remap(hmap, h._prev)
            h._face = remap(fmap, h._face)

        for f in faces:
            f._idx = fmap[f._idx]
            f._h = hmap[f._h]

        self._verts = {v._idx: v for v in verts}
        self._halfs = {h._idx: h for h in halfs}
        self._faces = {f._idx: f for f in faces}
        self._hmap = {(h._origin, self._halfs[h._idx ^ 1]._origin): h._idx
                      for h in halfs}

        self._nv = len(verts)
        self._nh = len(halfs)
        self._nf = len(faces)

        logger.info('cleaned mesh: %d vertices, %d edges, %d faces',
                    *self.size)

    def copy(self):
        """ Return mesh copy.

        Duplicate combinatorics and vertex coordinates of a mesh. Indices
        and index counters of the copy agree with the original, no mesh
        item or coordinate buffer is shared.

        Returns
        -------
        Mesh
            Copy of the mesh.
        """
        mesh = self.__class__()

        # Since _points is of type ndarray, this is a deep copy, i.e. no
        # parts of the vertex coordinate data buffers are shared.
        if self._points is not None:
            mesh._points = self._points.copy()

        # Items only hold integer handles, shallow copies re-parented to
        # the new mesh are fully independent.
        for items, target in ((self._verts, mesh._verts),
                              (self._halfs, mesh._halfs),
                              (self._faces, mesh._faces)):
            for index, item in items.items():
                target[index] = item._clone(mesh)

        mesh._hmap = self._hmap.copy()
        mesh._nv, mesh._nh, mesh._nf = self._nv, self._nh, self._nf

        return mesh

    def to_face_vertex(self):
        """ Face-vertex representation.

        Converts the mesh to the representation of :mod:`hemesh.fvs`.
        Vertex and face indices are kept, the edge formed by the halfedges
        with indices ``2 * i`` and ``2 * i + 1`` gets index ``i``. The
        mesh itself is not modified.

        Returns
        -------
        hemesh.fvs.Mesh
            Independent face-vertex mesh.
        """
        from hemesh import fvs

        mesh = fvs.Mesh()

        if self._points is not None:
            mesh._points = self._points.copy()

        for v in self._verts.values():
            mesh._add_vertex(v._idx)

        for h in self._halfs.values():
            if h._idx % 2 == 0:
                mesh._add_edge(h._idx // 2, h._origin,
                               self._halfs[h._idx ^ 1]._origin)

        for f in self._faces.values():
            mesh._add_face(f._idx, [v._idx for v in f._viter()],
                           [h._idx // 2 for h in f._hiter()])

        mesh._nv = self._nv
        mesh._ne = self._nh // 2
        mesh._nf = self._nf

        return mesh

    # Internals -----------------------------------------------------------

    def _vertex(self, item):
        """ Resolve a vertex or vertex index argument.
        """
        if isinstance(item, Vertex):
            if item._mesh is not self:
                raise ValueError(f'{item!r} is not a vertex of this mesh')

            return item

        return self._verts[item]

    def _link(self, h, g):
        """ Make `g` the successor of `h`.
        """
        h._next = g._idx
        g._prev = h._idx

    def _find_gap(self, h_in, h_out):
        """ Free gap in the boundary loop of a vertex.

        Rotates about the common vertex of `h_in` and `h_out` through the
        fan of `h_out` until the boundary halfedge pointing towards the
        vertex is found. Fans that follow `h_in` in the boundary loop are
        the ones moved by :meth:`add_face` and are never searched.

        Returns
        -------
        Halfedge
            Incoming boundary halfedge, the gap follows it.

        Raises
        ------
        NonManifoldError
            If `h_in` closes the fan of `h_out`. The remaining fans of
            the vertex would be disconnected.
        """
        g = h_out.pair

        while g._face is not None:
            g = g.next.pair

        if g is not h_in:
            return g

        msg = f'vertex #{h_out._origin} is non-manifold'
        raise NonManifoldError(msg)

    def _adjust_outgoing(self, v):
        """ Make a boundary halfedge the outgoing halfedge of `v`.

        Vertices without boundary halfedges are left unchanged.
        """
        if v._h is None or self._halfs[v._h]._face is None:
            return

        for h in v._hiter():
            if h._face is None:
                v._h = h._idx
                return

    def _erase_face_loop(self, face, start):
        """ Clear face references along a halfedge loop.

        The outgoing halfedge of a vertex is replaced by a halfedge of
        the loop if it is not a boundary halfedge.
        """
        h = start

        while True:
            h._face = None
            v = h.origin

            if self._halfs[v._h]._face is not None:
                v._h = h._idx

            h = h.next

            if h is start:
                break

        self._pop_face(face)

    def _pop_face(self, face):
        del self._faces[face._idx]
        face._invalidate()

    def _check(self):
        """ Perform sanity checks.
        """
        if self._points is None:
            assert self._nv == 0
        else:
            assert len(self._points) == self._nv

        assert len(self._hmap) == len(self._halfs)

        # Rotation about a vertex has to visit all of its outgoing
        # halfedges, including those of other fans.
        degree = dict.fromkeys(self._verts, 0)

        for h in self._halfs.values():
            degree[h._origin] += 1

        for i, v in self._verts.items():
            assert v._idx == i < self._nv
            assert v._mesh is self
            assert v.degree == degree[i]

            v._check()

        for i, h in self._halfs.items():
            assert h._idx == i < self._nh
            assert h._mesh is self
            assert self._hmap[h._origin, h.target._idx] == i

            h._check()

        for i, f in self._faces.items():
            assert f._idx == i < self._nf
            assert f._mesh is self

            f._check()

    def _viter(self):
        """ Generator expression.
        """
        return iter(self._verts.values())

    def _hiter(self):
        """ Generator expression.
        """
        return iter(self._halfs.values())

    def _eiter(self):
        """ Generator expression.
        """
        return (Edge(h) for h in self._halfs.values() if h._idx % 2 == 0)

    def _fiter(self):
        """ Generator expression.
        """
        return iter(self._faces.values())


class Vertex:
    """ Mesh vertex.

    Vertices are created by :meth:`Mesh.add_vertex`. A vertex stores its
    index and the index of one outgoing halfedge. If the vertex lies on
    the boundary this is a boundary halfedge.

    Parameters
    ----------
    index : int
        Vertex index.
    mesh : Mesh
        The parent mesh object.

    Note
    ----
    In addition to :attr:`index`, implementations of the special functions
    :meth:`~object.__int__` and :meth:`~object.__index__` are provided.
    The latter makes it possible to use vertex instances as list indices.
    """

    def __init__(self, index, mesh):
        self._idx = index
        self._mesh = mesh
        self._h = None

    def __repr__(self):
        return f'Vertex({self._idx})'

    def __index__(self):
        """ Vertex index.

        Vertices can be used directly as list and array indices, i.e.,
        one can write ``some_list[v]`` instead of the slightly longer
        ``some_list[v.index]`` expression.

        Returns
        -------
        int
            Vertex index.
        """
        return self._idx

    def __int__(self):
        return self._idx

    def __bool__(self):
        return True

    def __eq__(self, other):
        """ Structural equality.

        Two vertices are equal if they have the same index and the same
        coordinates. Erased vertices are only equal to themselves.
        """
        if not isinstance(other, Vertex):
            return NotImplemented

        if self.deleted or other.deleted:
            return self is other

        return (self._idx == other._idx
                and np.array_equal(self.point, other.point))

    def __hash__(self):
        return hash(self._idx)

    @property
    def index(self):
        """ Vertex index.

        Key of the vertex in the vertex container of its mesh. Same as
        ``int(self)``.

        :type: int
        """
        return self._idx

    @property
    def point(self):
        """ Vertex coordinates.

        Read and write access to vertex coordinates. View of the
        vertex coordinate array of the parent mesh.

        :type: ~numpy.ndarray
        """
        assert not self.deleted
        return self._mesh._points[self._idx, ...]

    @point.setter
    def point(self, value):
        assert not self.deleted
        self._mesh._points[self._idx, ...] = value

    @property
    def halfedge(self):
        """ Outward pointing halfedge.

        A halfedge that starts at the vertex or :obj:`None` for isolated
        vertices. For boundary vertices this is a boundary halfedge.

        :type: Halfedge
        """
        assert not self.deleted

        if self._h is None:
            return None

        return self._mesh._halfs[self._h]

    @property
    def degree(self):
        """ Vertex degree.

        The number of adjacent vertices, equivalent to the number of
        incident edges -- also called the valence of a vertex.

        :type: int
        """
        return sum(1 for _ in self._hiter())

    @property
    def deleted(self):
        """ Internal state.

        Erased vertices are detached from their mesh and have no valid
        index.

        :type: bool
        """
        return self._idx is None

    @property
    def boundary(self):
        """ Topological state.

        A vertex is a boundary vertex if it is incident to a boundary
        halfedge. Isolated vertices are boundary vertices as well.

        :type: bool
        """
        h = self.halfedge
        return h is None or h._face is None

    @property
    def isolated(self):
        """ Topological state.

        A vertex is isolated if it is not connected to any edge.

        :type: bool
        """
        assert not self.deleted
        return self._h is None

    @property
    def _manifold(self):
        """ Topological state.

        A vertex with more than one boundary fan of faces is called
        non-manifold. Isolated vertices are considered manifold vertices.

        :type: bool
        """
        return sum(1 for h in self._hiter() if h._face is None) <= 1

    def _check(self):
        """ Perform sanity checks.
        """
        if self._h is not None:
            h = self._mesh._halfs[self._h]

            assert h._origin == self._idx

            # The outgoing halfedge of a boundary vertex is a boundary
            # halfedge.
            if h._face is not None:
                assert all(g._face is not None for g in self._hiter())

    def _clone(self, mesh):
        item = copy(self)
        item._mesh = mesh
        return item

    def _invalidate(self):
        """ Reset all combinatorial attributes.

        Invalidate is called when the vertex is removed from its
        container. This should make it easier to find bugs originating
        from using references to erased objects.
        """
        self._idx = None
        self._mesh = None
        self._h = None

    def _viter(self):
        """ Adjacent vertex iterator.
        """
        return (h.target for h in self._hiter())

    def _fiter(self):
        """ Incident face iterator.
        """
        return (h.face for h in self._hiter() if h._face is not None)

    def _eiter(self):
        """ Incident edge iterator.
        """
        return (Edge(h) for h in self._hiter())

    def _hiter(self):
        """ Outgoing halfedge iterator.
        """
        assert not self.deleted
        start = self.halfedge

        if start is None:
            return

        h = start

        while True:
            yield h
            h = h.prev.pair

            if h is start:
                return


class Halfedge:
    """ Mesh halfedge.

    Halfedges store handles of their origin vertex, the successor and
    predecessor halfedge, as well as the incident face -- the face to its
    left. A closed loop of halfedges defines a face and its orientation.
    The pair halfedge is implicit in the index: halfedges ``2 * i`` and
    ``2 * i + 1`` form a pair.

    Parameters
    ----------
    index : int
        Halfedge index.
    mesh : Mesh
        The parent mesh object.
    origin : int
        Index of the origin vertex.
    """

    def __init__(self, index, mesh, origin):
        self._idx = index
        self._mesh = mesh
        self._origin = origin

        self._next = None
        self._prev = None
        self._face = None

    def __repr__(self):
        return f'Halfedge({self._idx})'

    def __bool__(self):
        return True

    def __eq__(self, other):
        """ Structural equality.

        Two halfedges are equal if they have the same index and connect
        vertices with the same indices.
        """
        if not isinstance(other, Halfedge):
            return NotImplemented

        if self.deleted or other.deleted:
            return self is other

        return (self._idx == other._idx
                and self._origin == other._origin
                and self.target._idx == other.target._idx)

    def __hash__(self):
        return hash(self._idx)

    def __contains__(self, vertex):
        """ Incidence test.

        Returns
        -------
        bool
            :obj:`True` if `vertex` is one of the halfedge's vertices.
        """
        return (vertex is self.origin) or (vertex is self.target)

    def __iter__(self):
        """ Vertex iterator.

        Produces the origin and target vertex of a halfedge.
        """
        yield self.origin
        yield self.target

    @property
    def index(self):
        """ Halfedge index.

        :type: int
        """
        return self._idx

    @property
    def origin(self):
        """ Halfedge origin vertex.

        :type: Vertex
        """
        assert not self.deleted
        return self._mesh._verts[self._origin]

    @property
    def target(self):
        """ Halfedge target vertex.

        :type: Vertex
        """
        assert not self.deleted
        return self._mesh._verts[self._mesh._halfs[self._idx ^ 1]._origin]

    @property
    def pair(self):
        """ Opposite halfedge.

        Halfedge pointing in the opposite direction.

        :type: Halfedge
        """
        assert not self.deleted
        return self._mesh._halfs[self._idx ^ 1]

    @property
    def next(self):
        """ Successor halfedge.

        Next halfedge in a face defining halfedge loop.

        :type: Halfedge
        """
        assert not self.deleted

        if self._next is None:
            return None

        return self._mesh._halfs[self._next]

    @property
    def prev(self):
        """ Predecessor halfedge.

        Previous halfedge in a face defining halfedge loop.

        :type: Halfedge
        """
        assert not self.deleted

        if self._prev is None:
            return None

        return self._mesh._halfs[self._prev]

    @property
    def face(self):
        """ Incident face.

        The face to left of the halfedge or :py:obj:`None` in case of
        a boundary halfedge.

        :type: Face
        """
        assert not self.deleted

        if self._face is None:
            return None

        return self._mesh._faces[self._face]

    @property
    def edge(self):
        """ The edge this halfedge belongs to.

        :type: Edge
        """
        return Edge(self)

    @property
    def vector(self):
        """ Halfedge direction vector.

        The vector ``self.target.point - self.origin.point``.

        :type: ~numpy.ndarray
        """
        return self.target.point - self.origin.point

    @property
    def midpoint(self):
        """ Halfedge midpoint.

        The point ``0.5 * (self.origin.point + self.target.point)``.

        :type: ~numpy.ndarray
        """
        return 0.5 * (self.origin.point + self.target.point)

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._idx is None

    @property
    def boundary(self):
        """ Topological state.

        A halfedge is called a boundary halfedge if its :attr:`face`
        attribute evaluates to :obj:`None`.

        :type: bool
        """
        assert not self.deleted
        return self._face is None

    def _compute_loop_len(self):
        """ Length of halfedge loop.

        Length of the closed halfedge loop starting at ``self``. For a
        boundary halfedge this is the length of the corresponding boundary
        curve.

        Returns
        -------
        int
            Length of halfedge loop.
        """
        loop_len = 0
        h = self

        while True:
            loop_len += 1
            h = h.next

            if h is self:
                return loop_len

    def _check(self):
        """ Perform sanity checks.
        """
        mesh = self._mesh
        pair = self.pair

        assert pair.pair is self
        assert pair._origin != self._origin
        assert self._origin in mesh._verts

        # Linked halfedges only, a pair returned by Mesh.add_pair that
        # was never linked has neither successor nor predecessor.
        if self._next is not None:
            assert self.next._prev == self._idx
            assert self.next._origin == pair._origin
            assert self.next._face == self._face

        if self._prev is not None:
            assert self.prev._next == self._idx
            assert self.prev.pair._origin == self._origin

        if self._face is not None:
            assert self._face in mesh._faces

    def _clone(self, mesh):
        item = copy(self)
        item._mesh = mesh
        return item

    def _invalidate(self):
        """ Reset all combinatorial attributes.
        """
        self._idx = None
        self._mesh = None
        self._origin = None

        self._next = None
        self._prev = None
        self._face = None


class Edge:
    """ Edge view.

    Non-owning view of a pair of halfedges. The edge with index ``i`` is
    formed by the halfedges ``2 * i`` and ``2 * i + 1``, origin and target
    of an edge are those of the even halfedge.

    Parameters
    ----------
    halfedge : Halfedge
        One of the two halfedges of the edge.
    """

    def __init__(self, halfedge):
        assert not halfedge.deleted

        if halfedge._idx % 2:
            halfedge = halfedge.pair

        self._halfedge = halfedge

    def __repr__(self):
        return f'Edge({self.index})'

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented

        if self.deleted or other.deleted:
            return self._halfedge is other._halfedge

        return (self.index == other.index
                and self.origin._idx == other.origin._idx
                and self.target._idx == other.target._idx)

    def __hash__(self):
        return hash(self._halfedge._idx)

    def __iter__(self):
        """ Vertex iterator, origin first.
        """
        yield self.origin
        yield self.target

    @property
    def index(self):
        """ Edge index.

        :type: int
        """
        assert not self.deleted
        return self._halfedge._idx // 2

    @property
    def halfedge(self):
        """ The even halfedge of the pair.

        :type: Halfedge
        """
        return self._halfedge

    @property
    def origin(self):
        """ Start vertex.

        :type: Vertex
        """
        return self._halfedge.origin

    @property
    def target(self):
        """ End vertex.

        :type: Vertex
        """
        return self._halfedge.target

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._halfedge.deleted

    @property
    def boundary(self):
        """ Topological state.

        An edge is a boundary edge if one of its halfedges is a boundary
        halfedge, i.e., if it has less than two adjacent faces.

        :type: bool
        """
        return self._halfedge.boundary or self._halfedge.pair.boundary

    @property
    def isolated(self):
        """ Topological state.

        An edge without adjacent faces, both of its halfedges are
        boundary halfedges. Such edges are removed by :meth:`Mesh.clean`.

        :type: bool
        """
        return self._halfedge.boundary and self._halfedge.pair.boundary

    def _viter(self):
        return iter(self)

    def _hiter(self):
        yield self._halfedge
        yield self._halfedge.pair

    def _fiter(self):
        """ Adjacent face iterator.
        """
        return (h.face for h in self._hiter() if h._face is not None)


class Face:
    """ Mesh face.

    In a halfedge based mesh representation a face is defined by the
    closed loop of halfedges starting at the :attr:`halfedge` attribute.

    Parameters
    ----------
    index : int
        Face index.
    mesh : Mesh
        The parent mesh object.


    The vertices of a face are visited by iterating over the face:

    .. code-block:: python

        for v in face:
            ...

    The halfedges of a face are visited with :func:`hemesh.iterators.halfs`.
    """

    def __init__(self, index, mesh):
        self._idx = index
        self._mesh = mesh
        self._h = None

    def __repr__(self):
        return f'Face({self._idx})'

    def __index__(self):
        return self._idx

    def __int__(self):
        return self._idx

    def __len__(self):
        """ Face valence.

        The number of incident vertices.

        Returns
        -------
        int
            Number of vertices.
        """
        return sum(1 for _ in self._hiter())

    def __bool__(self):
        return True

    def __eq__(self, other):
        """ Structural equality.

        Two faces are equal if they have the same index and the same
        first halfedge index.
        """
        if not isinstance(other, Face):
            return NotImplemented

        if self.deleted or other.deleted:
            return self is other

        return self._idx == other._idx and self._h == other._h

    def __hash__(self):
        return hash(self._idx)

    def __contains__(self, item):
        """ Vertex and halfedge containment test.

        Parameters
        ----------
        item : Vertex or Halfedge
            Item to be tested for incidence with the face.

        Returns
        -------
        bool
            :obj:`True` if the given item belongs to the face.
        """
        if isinstance(item, Halfedge):
            return any(h is item for h in self._hiter())

        return any(v is item for v in self._viter())

    def __iter__(self):
        """ Vertex iterator.

        The returned :term:`iterator` visits the vertices of ``self``
        starting with the ``self.halfedge.origin`` vertex.

        Yields
        ------
        Vertex
            Next vertex in counter-clockwise traversal.
        """
        return self._viter()

    @property
    def index(self):
        """ Face index.

        :type: int
        """
        return self._idx

    @property
    def halfedge(self):
        """ First halfedge of the face.

        :type: Halfedge
        """
        assert not self.deleted
        return self._mesh._halfs[self._h]

    @property
    def valence(self):
        """ Face valence.

        Number of incident vertices. Same as ``len(self)``.

        :type: int
        """
        return len(self)

    @property
    def deleted(self):
        """ Internal state.

        :type: bool
        """
        return self._idx is None

    @property
    def boundary(self):
        """ Topological state.

        A face is a boundary face if one of its halfedges has a boundary
        pair.

        :type: bool

        Note
        ----
        A face only incident with boundary vertices is **not** classified
        as a boundary face.
        """
        return any(h.pair._face is None for h in self._hiter())

    @property
    def barycenter(self):
        """ Face barycenter.

        Arithmetic mean of vertex coordinates.

        :type: ~numpy.ndarray
        """
        return sum(v.point for v in self) / len(self)

    def _check(self):
        """ Perform sanity checks.
        """
        assert self._h in self._mesh._halfs

        n = 0

        for h in self._hiter():
            assert h._face == self._idx
            n += 1

        assert n == self.halfedge._compute_loop_len()

    def _clone(self, mesh):
        item = copy(self)
        item._mesh = mesh
        return item

    def _invalidate(self):
        """ Reset all combinatorial attributes.
        """
        self._idx = None
        self._mesh = None
        self._h = None

    def _viter(self):
        """ Incident vertex iterator.
        """
        return (h.origin for h in self._hiter())

    def _hiter(self):
        """ Incident halfedge iterator.
        """
        assert not self.deleted

        start = self.halfedge
        h = start

        while True:
            yield h
            h = h.next

            if h is start:
                return

    def _eiter(self):
        """ Incident edge iterator.
        """
        return (Edge(h) for h in self._hiter())

    def _fiter(self):
        """ Edge-adjacent face iterator.

        This iterator defines two faces to be adjacent if they share
        a common edge.
        """
        return (h.pair.face for h in self._hiter()
                if h.pair._face is not None)


class NonManifoldError(Exception):
    """ Manifold exception base class.

    Raised if an operation results in a topological configuration that
    violates the manifold condition.
    """

    pass

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

""" Local remeshing operators for triangle meshes.

Edge collapse, edge flip, and edge split expressed in terms of the
primitive operations of :class:`hemesh.hds.Mesh`: erasing halfedges,
removing vertices, and adding vertices and faces. All operators take the
mesh as explicit first argument and identify the edge by one of its
halfedges.

.. code-block:: python

    from hemesh.hds import Mesh
    from hemesh import tri

    mesh = Mesh(points, faces)
    h = mesh.halfedge_between(0, 1)

    if tri.flippable(h):
        tri.flip_edge(mesh, h)
"""

import logging


logger = logging.getLogger(__name__)


def flippable(halfedge):
    """ Topological test for edge flips.

    A non-boundary edge of a triangle mesh can be flipped if the vertices
    opposite the edge are not adjacent.

    Parameters
    ----------
    halfedge : ~hemesh.hds.Halfedge
        One of the halfedges of the query edge.

    Returns
    -------
    bool
    """
    h = halfedge
    p = h.pair

    if h.deleted or h._face is None or p._face is None:
        return False

    if len(h.face) != 3 or len(p.face) != 3:
        return False

    left = h.next.target
    right = p.next.target

    return h._mesh.halfedge_between(left, right) is None


def collapsible(halfedge):
    """ Topological test for edge collapses.

    An edge of a **triangle mesh** is collapsible if the one-rings of its
    endpoints intersect in the vertices opposite the edge and if every
    vertex of the merged neighborhood keeps a face that is not incident
    with the edge's endpoints. Interior edges that connect two boundary
    vertices are not collapsible, neither are edges of a boundary loop of
    length three.

    Parameters
    ----------
    halfedge : ~hemesh.hds.Halfedge
        One of the halfedges of the query edge.

    Returns
    -------
    bool
    """
    if halfedge.deleted:
        return False

    h = halfedge
    p = h.pair

    sides = [g for g in (h, p) if g._face is not None]

    # Dangling edge.
    if not sides:
        return False

    v = h.origin
    w = h.target

    if len(sides) == 2:
        if v.boundary and w.boundary:
            return False
    elif sides[0].pair._compute_loop_len() == 3:
        return False

    faces = set(v._fiter()) | set(w._fiter())

    if any(len(f) != 3 for f in faces):
        return False

    v_neigh = {x for x in v._viter() if x is not w}
    w_neigh = {x for x in w._viter() if x is not v}

    opposite = {g.next.target for g in sides}

    if (v_neigh & w_neigh) != opposite:
        return False

    # Vertices of the neighborhood that are only incident with faces of
    # v and w would be erased together with v and w.
    for x in v_neigh | w_neigh:
        if not any(v not in f and w not in f for f in x._fiter()):
            return False

    return True


def flip_edge(mesh, halfedge):
    """ Perform edge flip.

    The two triangles adjacent to the edge of `halfedge` are replaced by
    two triangles connecting the vertices opposite the edge.

    Parameters
    ----------
    mesh : ~hemesh.hds.Mesh
        The mesh `halfedge` belongs to.
    halfedge : ~hemesh.hds.Halfedge
        One of the halfedges of the edge to be flipped.

    Returns
    -------
    ~hemesh.hds.Halfedge or None
        The halfedge of the new edge that lies in the face incident with
        ``halfedge.origin``. :obj:`None` if the edge is not flippable,
        in this case the mesh is not modified.
    """
    if not flippable(halfedge):
        logger.debug('%r is not flippable', halfedge)
        return None

    h = halfedge
    p = h.pair

    start = h.origin
    end = h.target
    left = h.next.target
    right = p.next.target

    mesh.erase_halfedge(h)

    mesh.add_face(right, left, start)
    mesh.add_face(left, right, end)

    return mesh.halfedge_between(right, left)


def split_edge(mesh, halfedge):
    """ Perform edge split.

    A new vertex is inserted at the midpoint of the edge of `halfedge`.
    Each triangle adjacent to the edge is replaced by two triangles that
    share an edge with the new vertex.

    Parameters
    ----------
    mesh : ~hemesh.hds.Mesh
        The mesh `halfedge` belongs to.
    halfedge : ~hemesh.hds.Halfedge
        One of the halfedges of the edge to be split.

    Returns
    -------
    ~hemesh.hds.Vertex
        The new vertex. It is isolated if the edge had no adjacent face.
    """
    h = halfedge
    p = h.pair

    start = h.origin
    end = h.target

    left = None if h._face is None else h.next.target
    right = None if p._face is None else p.next.target

    point = h.midpoint

    mesh.erase_halfedge(h)
    m = mesh.add_vertex(point)

    if left is not None:
        mesh.add_face(left, start, m)
        mesh.add_face(end, left, m)

    if right is not None:
        mesh.add_face(start, right, m)
        mesh.add_face(right, end, m)

    return m


def collapse_edge(mesh, halfedge):
    """ Perform edge collapse.

    Both endpoints of the edge of `halfedge` are removed together with
    all of their faces. A new vertex is inserted at the edge midpoint and
    the hole is filled by a fan of triangles around the new vertex.

    Parameters
    ----------
    mesh : ~hemesh.hds.Mesh
        The mesh `halfedge` belongs to.
    halfedge : ~hemesh.hds.Halfedge
        One of the halfedges of the edge to be collapsed.

    Returns
    -------
    ~hemesh.hds.Vertex or None
        The new vertex. :obj:`None` if the edge is not collapsible (see
        :func:`collapsible`), in this case the mesh is not modified.
    """
    if not collapsible(halfedge):
        logger.debug('%r is not collapsible', halfedge)
        return None

    h = halfedge
    p = h.pair

    start = h.origin
    end = h.target

    # Pairs of consecutive one-ring vertices, one pair for each face that
    # survives the collapse. Rotation starts right after the edge.
    fan = _fan(h) + _fan(p)

    # Start at a gap of the fan (if any) so that the faces are added as a
    # single growing fan about the new vertex.
    for k in range(len(fan)):
        if fan[k - 1][1] is not fan[k][0]:
            fan = fan[k:] + fan[:k]
            break

    point = h.midpoint

    mesh.remove_vertex(start)

    if not end.deleted:
        mesh.remove_vertex(end)

    m = mesh.add_vertex(point)

    for a, b in fan:
        mesh.add_face(m, a, b)

    logger.debug('collapsed edge into %r', m)

    return m


def _fan(halfedge):
    """ Face fan about the origin of `halfedge`.

    Rotates about ``halfedge.origin`` starting after `halfedge`. Faces
    incident with ``halfedge.target`` are skipped.

    Returns
    -------
    list[tuple]
        Vertex pairs ``(a, b)``, one for each triangle ``(origin, a, b)``.
    """
    w = halfedge.target
    fan = []

    h = halfedge

    while True:
        h = h.prev.pair

        if h is halfedge:
            return fan

        if h._face is None:
            continue

        a = h.target
        b = h.next.target

        if a is not w and b is not w:
            fan.append((a, b))

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

""" Combinatorial mesh item neighborhood iterators.

Adjacent/incident mesh items are visited in rotational order as
determined by the mesh orientation (whenever it makes sense to consider
oriented item traversal). The iterators work for the items of a
:class:`hemesh.hds.Mesh` as well as for the items of a
:class:`hemesh.fvs.Mesh` whenever the corresponding adjacency is stored
by the face-vertex model.

Note
----
Neighborhood iterators of a halfedge mesh are lazy. Modifying the mesh
while iterating over the neighborhood of one of its items is undefined,
use a list (``list(faces(v))``) to take a snapshot first.
"""


def verts(obj):
    """ Vertex iterator.

    The returned iterator traverses adjacent/incident vertices
    of `obj` depending on its type:

    .. table::
       :width: 100%
       :widths: 20, 80

       =============== ================================================
       :class:`Vertex` ↺ traversal of adjacent vertices
       --------------- ------------------------------------------------
       :class:`Edge`   origin and target vertex
       --------------- ------------------------------------------------
       :class:`Face`   ↺ traversal of incident vertices
       --------------- ------------------------------------------------
       :class:`Mesh`   in-order traversal of :attr:`~Mesh.vertices`
       =============== ================================================

    Parameters
    ----------
    obj : Vertex or Edge or Face or Mesh
        The base object.

    Yields
    ------
    Vertex
    """
    return obj._viter()


def halfs(obj):
    """ Halfedge iterator

    The returned iterator traverses incident halfedges of `obj`
    depending on its type:

    .. table::
       :width: 100%
       :widths: 20, 80

       =============== ================================================
       :class:`Vertex` ↺ traversal of outward pointing halfedges
       --------------- ------------------------------------------------
       :class:`Edge`   the two halfedges of the edge, even index first
       --------------- ------------------------------------------------
       :class:`Face`   ↺ traversal of incident halfedges
       --------------- ------------------------------------------------
       :class:`Mesh`   traversal of :attr:`~Mesh.halfedges`
       =============== ================================================

    Parameters
    ----------
    obj : Vertex or Edge or Face or Mesh
        The base object, items of a halfedge mesh only.

    Yields
    ------
    Halfedge
    """
    return obj._hiter()


def incoming(vertex):
    """ Incoming halfedge iterator.

    Traverses the halfedges pointing towards `vertex`, these are the
    pairs of the halfedges visited by :func:`halfs`.

    Parameters
    ----------
    vertex : ~hemesh.hds.Vertex
        The base vertex.

    Yields
    ------
    Halfedge
    """
    return (h.pair for h in vertex._hiter())


def edges(obj):
    """ Edge iterator.

    Formally, an undirected edge is defined as a pair of oppositely
    oriented halfedges. The returned iterator visits the edges of `obj`
    depending on its type:

    .. table::
       :width: 100%
       :widths: 20, 80

       =============== ================================================
       :class:`Vertex` ↺ traversal of incident edges
       --------------- ------------------------------------------------
       :class:`Face`   ↺ traversal of incident edges
       --------------- ------------------------------------------------
       :class:`Mesh`   in-order traversal of :attr:`~Mesh.edges`
       =============== ================================================

    Parameters
    ----------
    obj : Vertex or Face or Mesh
        The base object.

    Yields
    ------
    Edge
    """
    return obj._eiter()


def faces(obj):
    """ Face iterator.

    A vertex :math:`v` and a face :math:`f` are incident if
    :math:`v \\in f`. Two faces are incident if they share a common edge.
    The returned iterator visits the incident faces of `obj` depending
    on its type:

    .. table::
       :width: 100%
       :widths: 20, 80

       =============== ================================================
       :class:`Vertex` ↺ traversal of incident faces
       --------------- ------------------------------------------------
       :class:`Edge`   faces to the left and to the right of the edge
       --------------- ------------------------------------------------
       :class:`Face`   ↺ traversal of edge-adjacent faces
       --------------- ------------------------------------------------
       :class:`Mesh`   in-order traversal of :attr:`~Mesh.faces`
       =============== ================================================

    Parameters
    ----------
    obj : Vertex or Edge or Face or Mesh
        The base object.

    Yields
    ------
    Face
    """
    return obj._fiter()

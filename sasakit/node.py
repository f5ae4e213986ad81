"""Result trees: areas of atoms summed over residues, chains and structures."""

from __future__ import annotations

import copy
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from itertools import groupby
from typing import Any


class NodeType(Enum):
    """Level of a node in a result tree."""

    ATOM = "atom"
    RESIDUE = "residue"
    CHAIN = "chain"
    STRUCTURE = "structure"
    RESULT = "result"
    ROOT = "root"


class AtomClass(Enum):
    """Polarity class of an atom."""

    APOLAR = "apolar"
    POLAR = "polar"
    UNKNOWN = "unknown"


class Algorithm(Enum):
    """Surface area algorithm; the value is its display name."""

    LEE_RICHARDS = "Lee & Richards"
    SHRAKE_RUPLEY = "Shrake & Rupley"


@dataclass
class Parameters:
    """Parameters of a surface area calculation."""

    alg: Algorithm = Algorithm.LEE_RICHARDS
    probe_radius: float = 1.4
    shrake_rupley_n_points: int = 100
    lee_richards_n_slices: int = 20
    n_threads: int = 1


@dataclass
class NodeArea:
    """Surface area of a node, split into its components."""

    name: str | None = None
    total: float = 0.0
    main_chain: float = 0.0
    side_chain: float = 0.0
    polar: float = 0.0
    apolar: float = 0.0
    unknown: float = 0.0

    def add(self, other: NodeArea) -> None:
        """Add the areas of ``other`` to this one, keeping this name."""
        self.total += other.total
        self.side_chain += other.side_chain
        self.main_chain += other.main_chain
        self.polar += other.polar
        self.apolar += other.apolar
        self.unknown += other.unknown


@dataclass(frozen=True)
class AtomRecord:
    """What a result tree needs to know about one atom of a structure.

    ``reference`` is the reference area of the residue the atom belongs
    to, used for relative areas; it is read from the first atom of a
    residue.
    """

    name: str
    res_name: str
    res_number: str
    chain: str
    radius: float
    atom_class: AtomClass = AtomClass.UNKNOWN
    is_backbone: bool = False
    pdb_line: str | None = None
    reference: NodeArea | None = None


@dataclass(eq=False)
class Node:
    """A node in a result tree.

    Only the attributes that belong to the node's type are set; the
    others stay ``None``.
    """

    type: NodeType
    name: str | None = None
    area: NodeArea | None = None
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Node | None = field(default=None, repr=False)

    # atom
    is_polar: bool | None = None
    is_mainchain: bool | None = None
    radius: float | None = None
    pdb_line: str | None = None
    residue_name: str | None = None
    chain: str | None = None
    # atom and residue
    residue_number: str | None = None
    # residue
    n_atoms: int | None = None
    reference: NodeArea | None = None
    # chain
    n_residues: int | None = None
    # structure
    n_chains: int | None = None
    model: int | None = None
    chain_labels: str | None = None
    cif_ref: int | None = None
    sasa: tuple[float, ...] | None = None
    selections: list[Any] | None = None
    # result
    classified_by: str | None = None
    parameters: Parameters | None = None
    n_structures: int | None = None

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def _require(self, node_type: NodeType) -> None:
        if self.type is not node_type:
            raise TypeError(
                f"operation needs a {node_type.value} node, not a {self.type.value} node"
            )

    def add_result(self, result: Node) -> None:
        """Put a result node first among the children of this root."""
        self._require(NodeType.ROOT)
        if result.type is not NodeType.RESULT:
            raise TypeError("only result nodes can be added to a tree")
        result.parent = self
        self.children.insert(0, result)

    def join(self, other: Node) -> None:
        """Move all results of root ``other`` to the end of this root; empties ``other``."""
        self._require(NodeType.ROOT)
        other._require(NodeType.ROOT)
        if other is self:
            raise ValueError("cannot join a tree with itself")
        for result in other.children:
            result.parent = self
        self.children.extend(other.children)
        other.children = []

    def add_selection(self, selection: Any) -> None:
        """Attach a copy of a selection to this structure node."""
        self._require(NodeType.STRUCTURE)
        if self.selections is None:
            self.selections = []
        self.selections.append(copy.copy(selection))


def atom_nodearea(
    name: str | None, sasa: float, is_backbone: bool, atom_class: AtomClass
) -> NodeArea:
    """Area of one atom, assigned to main or side chain and to its class."""
    area = NodeArea(name=name, total=sasa)
    if is_backbone:
        area.main_chain = sasa
    else:
        area.side_chain = sasa
    if atom_class is AtomClass.APOLAR:
        area.apolar = sasa
    elif atom_class is AtomClass.POLAR:
        area.polar = sasa
    else:
        area.unknown = sasa
    return area


def range_nodearea(
    atoms: Sequence[AtomRecord], sasa: Sequence[float], first: int, last: int
) -> NodeArea:
    """Summed area of the atoms ``first`` to ``last``, both included."""
    if first > last:
        raise ValueError(f"first atom {first} comes after last atom {last}")
    if first < 0 or last >= len(atoms) or last >= len(sasa):
        raise IndexError(f"atom range {first}..{last} out of range")
    total = NodeArea()
    for atom, value in zip(atoms[first:last + 1], sasa[first:last + 1]):
        total.add(atom_nodearea(atom.name, value, atom.is_backbone, atom.atom_class))
    return total


def tree_new() -> Node:
    """An empty tree root."""
    return Node(type=NodeType.ROOT)


def _adopt(parent: Node, children: list[Node]) -> None:
    parent.children = children
    area = NodeArea(name=parent.name)
    for child in children:
        child.parent = parent
        if child.area is not None:
            area.add(child.area)
    parent.area = area


def _atom_node(atom: AtomRecord, value: float) -> Node:
    return Node(
        type=NodeType.ATOM,
        name=atom.name,
        area=atom_nodearea(atom.name, value, atom.is_backbone, atom.atom_class),
        is_polar=atom.atom_class is AtomClass.POLAR,
        is_mainchain=atom.is_backbone,
        radius=atom.radius,
        pdb_line=atom.pdb_line,
        residue_name=atom.res_name,
        chain=atom.chain,
        residue_number=atom.res_number,
    )


def _residue_node(
    atoms: Sequence[AtomRecord], sasa: Sequence[float], indices: list[int]
) -> Node:
    first = atoms[indices[0]]
    reference = copy.copy(first.reference) if first.reference is not None else None
    residue = Node(
        type=NodeType.RESIDUE,
        name=first.res_name,
        residue_number=first.res_number,
        n_atoms=len(indices),
        reference=reference,
    )
    _adopt(residue, [_atom_node(atoms[i], sasa[i]) for i in indices])
    return residue


def _chain_node(
    atoms: Sequence[AtomRecord], sasa: Sequence[float], indices: list[int]
) -> Node:
    residues = [
        _residue_node(atoms, sasa, list(group))
        for _, group in groupby(indices, key=lambda i: atoms[i].res_number)
    ]
    chain = Node(
        type=NodeType.CHAIN, name=atoms[indices[0]].chain, n_residues=len(residues)
    )
    _adopt(chain, residues)
    return chain


def build_structure(
    atoms: Sequence[AtomRecord],
    sasa: Sequence[float],
    model: int = 0,
    cif_ref: int = 0,
) -> Node:
    """Structure node with chain, residue and atom nodes below it.

    Consecutive atoms with the same chain label form a chain, and within
    a chain consecutive atoms with the same residue number form a residue.
    """
    if len(atoms) != len(sasa):
        raise ValueError(f"{len(sasa)} areas given for {len(atoms)} atoms")
    if not atoms:
        raise ValueError("cannot build a structure node without atoms")
    chains = [
        _chain_node(atoms, sasa, list(group))
        for _, group in groupby(range(len(atoms)), key=lambda i: atoms[i].chain)
    ]
    labels = "".join(chain.name or "" for chain in chains)
    structure = Node(
        type=NodeType.STRUCTURE,
        name=labels,
        n_chains=len(chains),
        n_atoms=len(atoms),
        model=model,
        chain_labels=labels,
        cif_ref=cif_ref,
        sasa=tuple(float(v) for v in sasa),
    )
    _adopt(structure, chains)
    return structure


def build_result(
    atoms: Sequence[AtomRecord],
    sasa: Sequence[float],
    parameters: Parameters | None = None,
    name: str | None = None,
    classified_by: str = "",
    model: int = 0,
    cif_ref: int = 0,
) -> Node:
    """Result node holding one structure node for the given atoms."""
    structure = build_structure(atoms, sasa, model, cif_ref)
    result = Node(
        type=NodeType.RESULT,
        name=name,
        classified_by=classified_by,
        parameters=copy.copy(parameters) if parameters is not None else Parameters(),
        n_structures=1,
    )
    structure.parent = result
    result.children = [structure]
    return result
import pytest

from sasakit.node import (
    AtomClass,
    AtomRecord,
    Node,
    NodeArea,
    NodeType,
    Parameters,
    atom_nodearea,
    build_result,
    build_structure,
    range_nodearea,
    tree_new,
)


def _atoms():
    ref = NodeArea(name="ALA", total=100.0, main_chain=40.0, side_chain=60.0,
                   polar=30.0, apolar=70.0)
    return [
        AtomRecord("N", "ALA", "1", "A", 1.65, AtomClass.POLAR, True, reference=ref),
        AtomRecord("CA", "ALA", "1", "A", 1.87, AtomClass.APOLAR, True, reference=ref),
        AtomRecord("CB", "ALA", "1", "A", 1.87, AtomClass.APOLAR, False, reference=ref),
        AtomRecord("N", "GLY", "2", "A", 1.65, AtomClass.POLAR, True),
        AtomRecord("CA", "GLY", "2", "A", 1.87, AtomClass.APOLAR, True),
        AtomRecord("OG", "SER", "1", "B", 1.4, AtomClass.POLAR, False),
        AtomRecord("X", "UNK", "2", "B", 1.8, AtomClass.UNKNOWN, False),
    ]


SASA = [10.0, 5.0, 20.0, 7.5, 2.5, 30.0, 4.0]


def test_atom_nodearea_backbone_polar():
    area = atom_nodearea("N", 3.0, True, AtomClass.POLAR)
    assert area.total == 3.0
    assert area.main_chain == 3.0
    assert area.side_chain == 0.0
    assert area.polar == 3.0
    assert area.apolar == 0.0
    assert area.name == "N"


def test_atom_nodearea_sidechain_unknown():
    area = atom_nodearea("X", 2.0, False, AtomClass.UNKNOWN)
    assert area.side_chain == 2.0
    assert area.main_chain == 0.0
    assert area.unknown == 2.0
    assert area.polar == area.apolar == 0.0


def test_nodearea_add():
    a = NodeArea(name="a", total=1.0, polar=1.0, unknown=0.5)
    a.add(NodeArea(name="b", total=2.0, apolar=2.0, unknown=0.5))
    assert a.name == "a"
    assert a.total == pytest.approx(3.0)
    assert a.polar == pytest.approx(1.0)
    assert a.apolar == pytest.approx(2.0)
    assert a.unknown == pytest.approx(1.0)


def test_range_nodearea_sums():
    atoms = _atoms()
    area = range_nodearea(atoms, SASA, 0, len(atoms) - 1)
    assert area.total == pytest.approx(sum(SASA))
    assert area.main_chain + area.side_chain == pytest.approx(area.total)
    assert area.polar + area.apolar + area.unknown == pytest.approx(area.total)


def test_range_nodearea_errors():
    atoms = _atoms()
    with pytest.raises(ValueError):
        range_nodearea(atoms, SASA, 3, 2)
    with pytest.raises(IndexError):
        range_nodearea(atoms, SASA, 0, len(atoms))


def test_structure_layout():
    structure = build_structure(_atoms(), SASA, model=2, cif_ref=7)
    assert structure.type is NodeType.STRUCTURE
    assert structure.chain_labels == "AB"
    assert structure.name == "AB"
    assert structure.n_chains == 2
    assert structure.n_atoms == 7
    assert structure.model == 2
    assert structure.cif_ref == 7
    assert structure.sasa == tuple(SASA)
    chains = list(structure)
    assert [c.name for c in chains] == ["A", "B"]
    assert [c.n_residues for c in chains] == [2, 2]
    residues = list(chains[0])
    assert [r.name for r in residues] == ["ALA", "GLY"]
    assert [r.n_atoms for r in residues] == [3, 2]
    assert residues[0].residue_number == "1"
    assert residues[0].reference.total == 100.0
    assert residues[1].reference is None


def test_structure_areas_consistent():
    structure = build_structure(_atoms(), SASA)
    assert structure.area.total == pytest.approx(sum(SASA))
    assert structure.area.name == "AB"
    for chain in structure:
        assert chain.parent is structure
        assert chain.area.total == pytest.approx(sum(r.area.total for r in chain))
        for residue in chain:
            assert residue.parent is chain
            assert residue.area.name == residue.name
            assert residue.area.total == pytest.approx(sum(a.area.total for a in residue))


def test_atom_node_properties():
    structure = build_structure(_atoms(), SASA)
    atom = structure.children[0].children[0].children[0]
    assert atom.type is NodeType.ATOM
    assert atom.name == "N"
    assert atom.is_polar is True
    assert atom.is_mainchain is True
    assert atom.radius == 1.65
    assert atom.chain == "A"
    assert atom.residue_name == "ALA"
    assert atom.residue_number == "1"
    assert atom.area.total == 10.0


def test_build_structure_errors():
    with pytest.raises(ValueError):
        build_structure([], [])
    with pytest.raises(ValueError):
        build_structure(_atoms(), SASA[:-1])


def test_build_result():
    params = Parameters(probe_radius=1.2)
    result = build_result(_atoms(), SASA, params, "input", "ProtOr")
    assert result.type is NodeType.RESULT
    assert result.name == "input"
    assert result.classified_by == "ProtOr"
    assert result.parameters.probe_radius == 1.2
    assert result.n_structures == 1
    assert len(result.children) == 1
    assert result.children[0].parent is result
    assert result.area is None


def test_add_result_prepends():
    tree = tree_new()
    first = build_result(_atoms(), SASA, name="first")
    second = build_result(_atoms(), SASA, name="second")
    tree.add_result(first)
    tree.add_result(second)
    assert [r.name for r in tree] == ["second", "first"]
    with pytest.raises(TypeError):
        tree.add_result(tree_new())


def test_join_moves_results():
    tree1, tree2 = tree_new(), tree_new()
    tree1.add_result(build_result(_atoms(), SASA, name="a"))
    tree2.add_result(build_result(_atoms(), SASA, name="b"))
    tree1.join(tree2)
    assert [r.name for r in tree1] == ["a", "b"]
    assert tree2.children == []
    assert tree1.children[1].parent is tree1


def test_join_needs_roots():
    structure = build_structure(_atoms(), SASA)
    with pytest.raises(TypeError):
        tree_new().join(structure)


def test_add_selection():
    structure = build_structure(_atoms(), SASA)
    selection = {"name": "sel", "area": 12.0}
    structure.add_selection(selection)
    structure.add_selection(selection)
    assert structure.selections == [selection, selection]
    assert structure.selections[0] is not selection
    with pytest.raises(TypeError):
        Node(type=NodeType.CHAIN).add_selection(selection)
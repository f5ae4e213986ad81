# sasakit

Solvent accessible surface area (SASA) calculations for sets of spheres,
a result tree that sums atom areas over residues, chains and structures,
helpers for reading fields of PDB `ATOM`/`HETATM` records, and writers
for annotated PDB files and RSA tables.

The package has no dependencies outside the standard library.

## Installation

```
pip install sasakit
```

## Modules

- `sasakit.nb`: neighbour lists built with cell lists.
  `NeighborList(coords, radii)` finds every pair of overlapping spheres;
  `neighbors[i]`, `xy_distances[i]`, `x_offsets[i]` and `y_offsets[i]`
  describe the neighbours of sphere `i`, and `contact(i, j)` tells
  whether two spheres overlap. `CellList(cell_size, coords)` is the
  underlying grid of `Cell` objects.
- `sasakit.lee_richards`: `lee_richards(coords, radii, probe_radius=1.4,
  n_slices=20, n_threads=1)` returns one area per atom using the
  slicing algorithm. `exposed_arc_length(arcs)` gives the part of a
  circle not covered by a set of `(start, end)` arcs.
- `sasakit.shrake_rupley`: `shrake_rupley(coords, radii,
  probe_radius=1.4, n_points=100, n_threads=1)` returns one area per
  atom using test points; `test_points(n)` gives the golden-section
  spiral of `n` points on the unit sphere.
- `sasakit.node`: the result tree. `AtomRecord` describes one atom
  (name, residue, chain, radius, `AtomClass`, backbone flag, optional
  PDB line and residue reference area). `build_structure` and
  `build_result` group consecutive atoms into chains and residues and
  sum their `NodeArea` (total, main chain, side chain, polar, apolar,
  unknown). `tree_new()` makes an empty root; `Node.add_result`,
  `Node.join` and `Node.add_selection` change a tree, and iterating a
  `Node` yields its children. `Parameters` and `Algorithm` record how
  the areas were calculated.
- `sasakit.pdb`: field readers for `ATOM`/`HETATM` lines (`atom_name`,
  `residue_name`, `residue_number`, `chain_label`, `alt_coord_label`,
  `element_symbol`, `coordinates`, `occupancy`, `bfactor`,
  `is_hydrogen`), `model_ranges` and `chain_ranges` for locating models
  and chains in an open file, and `write_pdb(output, root)`, which
  writes each atom's record with the radius in the occupancy column and
  the SASA in the temperature-factor column. Invalid lines raise
  `PdbError`.
- `sasakit.rsa`: `write_rsa(output, tree, skip_rel=False)` writes the
  first structure of the first result in a tree as an RSA table with
  absolute and relative areas per residue and sums per chain;
  `relative_nodearea(absolute, reference)` computes the percentages.

## Example

```python
import sys

from sasakit.lee_richards import lee_richards
from sasakit.node import AtomClass, AtomRecord, build_result, tree_new
from sasakit.rsa import write_rsa

coords = [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0)]
radii = [1.8, 1.8]
areas = lee_richards(coords, radii, 1.4, 20, 1)

atoms = [
    AtomRecord(" CA ", "ALA", "   1 ", "A", 1.8, AtomClass.APOLAR, True),
    AtomRecord(" CB ", "ALA", "   1 ", "A", 1.8, AtomClass.APOLAR, False),
]
tree = tree_new()
tree.add_result(build_result(atoms, areas, name="example"))
write_rsa(sys.stdout, tree)
```

Areas are in square ångström when coordinates and radii are in ångström.

## What the package does not do

There is no command-line program. The package does not read whole PDB
or mmCIF files into structures, does not assign atomic radii or polarity
classes (the caller supplies them in `AtomRecord`), has no selection
language, and does not write JSON, XML or mmCIF output.

## Tests

```
pip install -e .[test]
pytest
```
"""Relative surface areas per residue, written in the RSA text format."""

from __future__ import annotations

import math
from typing import TextIO

from sasakit.node import Algorithm, Node, NodeArea, NodeType, Parameters
from sasakit.pdb import GENERATOR


def _percent(value: float, reference: float) -> float:
    """``100 * value / reference``, giving inf or nan where the reference is zero."""
    if reference == 0:
        if value == 0 or math.isnan(value):
            return math.nan
        return math.copysign(math.inf, value) * math.copysign(1.0, reference)
    return 100.0 * value / reference


def relative_nodearea(absolute: NodeArea, reference: NodeArea) -> NodeArea:
    """Areas of ``absolute`` as percentages of those in ``reference``.

    Components whose reference is zero come out as inf or nan. The
    ``unknown`` component is not compared and stays zero.
    """
    return NodeArea(
        name=absolute.name,
        total=_percent(absolute.total, reference.total),
        side_chain=_percent(absolute.side_chain, reference.side_chain),
        main_chain=_percent(absolute.main_chain, reference.main_chain),
        polar=_percent(absolute.polar, reference.polar),
        apolar=_percent(absolute.apolar, reference.apolar),
    )


def _header(
    classified_by: str,
    protein_name: str,
    chains: str,
    parameters: Parameters,
    skip_rel: bool,
) -> list[str]:
    lines = [
        f"REM  {GENERATOR}",
        f"REM  Absolute and relative SASAs for {protein_name}",
    ]
    if skip_rel:
        lines.append("REM  No reference values available to calculate relative SASA")
    else:
        lines.append(
            f"REM  Atomic radii and reference values for relative SASA: {classified_by}"
        )
    lines.append(f"REM  Chains: {chains}")
    lines.append(f"REM  Algorithm: {parameters.alg.value}")
    lines.append(f"REM  Probe-radius: {parameters.probe_radius:.2f}")
    if parameters.alg is Algorithm.LEE_RICHARDS:
        lines.append(f"REM  Slices: {parameters.lee_richards_n_slices}")
    elif parameters.alg is Algorithm.SHRAKE_RUPLEY:
        lines.append(f"REM  Test-points: {parameters.shrake_rupley_n_points}")
    lines.append(
        "REM RES _ NUM      All-atoms   Total-Side   Main-Chain    Non-polar    All polar"
    )
    lines.append(
        "REM                ABS   REL    ABS   REL    ABS   REL    ABS   REL    ABS   REL"
    )
    return lines


def _abs_rel(absolute: float, relative: float | None) -> str:
    text = f"{absolute:7.2f}"
    if relative is not None and math.isfinite(relative):
        return text + f"{relative:6.1f}"
    return text + "   N/A"


def _residue_line(chain_name: str, residue: Node, relative: NodeArea | None) -> str:
    area = residue.area or NodeArea(name=residue.name)
    prefix = f"RES {area.name or ''} {chain_name:>3}{residue.residue_number or '':<4} "
    components = ("total", "side_chain", "main_chain", "apolar", "polar")
    fields = "".join(
        _abs_rel(
            getattr(area, component),
            getattr(relative, component) if relative is not None else None,
        )
        for component in components
    )
    return prefix + fields


def _sums(area: NodeArea) -> str:
    return (
        f"{area.total:10.1f}   {area.side_chain:10.1f}   {area.main_chain:10.1f}   "
        f"{area.apolar:10.1f}   {area.polar:10.1f}"
    )


def write_rsa(output: TextIO, tree: Node, skip_rel: bool = False) -> None:
    """Write the first structure of the first result in ``tree`` as RSA.

    With ``skip_rel`` the relative columns are left as N/A.
    """
    if tree.type is not NodeType.ROOT:
        raise TypeError("write_rsa needs the root of a result tree")
    if not tree.children:
        raise ValueError("result tree is empty")
    result = tree.children[0]
    if not result.children:
        raise ValueError("result holds no structure")
    structure = result.children[0]
    parameters = result.parameters or Parameters()

    lines = _header(
        result.classified_by or "",
        result.name or "",
        structure.name or "",
        parameters,
        skip_rel,
    )

    for chain in structure:
        for residue in chain:
            relative = None
            if residue.reference is not None and not skip_rel and residue.area is not None:
                relative = relative_nodearea(residue.area, residue.reference)
            lines.append(_residue_line(chain.name or "", residue, relative))

    lines.append("END  Absolute sums over single chains surface")
    for index, chain in enumerate(structure, start=1):
        area = chain.area or NodeArea()
        lines.append(f"CHAIN{index:3d} {chain.name or '':>3} {_sums(area)}")

    lines.append("END  Absolute sums over all chains")
    lines.append(f"TOTAL        {_sums(structure.area or NodeArea())}")

    output.write("\n".join(lines) + "\n")
    output.flush()
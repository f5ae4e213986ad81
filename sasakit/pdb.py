"""Reading fields of PDB ATOM/HETATM lines and writing results as PDB."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from typing import TextIO

from sasakit.node import Node, NodeType

ATOM_NAME_LENGTH = 4
RES_NAME_LENGTH = 3
RES_NUMBER_LENGTH = 5
SYMBOL_LENGTH = 2
LINE_LENGTH = 80

GENERATOR = "sasakit"

_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INTEGER = re.compile(r"\s*([+-]?\d+)")


class PdbError(ValueError):
    """A PDB line or file could not be read or written."""


@dataclass
class FileRange:
    """A range of positions in a file, as returned by ``tell()``."""

    begin: int
    end: int


def line_check(line: str, length: int) -> bool:
    """Whether ``line`` is an ATOM/HETATM record at least ``length`` long."""
    if length < 6 or len(line) < length:
        return False
    return line.startswith("ATOM") or line.startswith("HETATM")


def _scan_float(text: str) -> tuple[float, str] | None:
    """Read a float prefix after leading whitespace; return it and the rest."""
    stripped = text.lstrip()
    match = _FLOAT.match(stripped)
    if match is None:
        return None
    return float(match.group(0)), stripped[match.end():]


def _single_precision(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return float("inf") if value > 0 else float("-inf")


def get_double(text: str, width: int) -> float | None:
    """The number at the start of the first ``width`` characters of ``text``.

    Returns ``None`` if that field holds no number. The value has single
    precision.
    """
    scanned = _scan_float(text[:width])
    if scanned is None:
        return None
    return _single_precision(scanned[0])


def _require(line: str, length: int) -> None:
    if not line_check(line, length):
        raise PdbError(f"not a valid ATOM or HETATM line: {line!r}")


def atom_name(line: str) -> str:
    """The padded atom name, such as ``" CA "``."""
    _require(line, 12 + ATOM_NAME_LENGTH)
    return line[12:12 + ATOM_NAME_LENGTH]


def residue_name(line: str) -> str:
    """The residue name, such as ``"ALA"``."""
    _require(line, 17 + RES_NAME_LENGTH)
    return line[17:17 + RES_NAME_LENGTH]


def coordinates(line: str) -> tuple[float, float, float]:
    """The x, y and z coordinates of the atom."""
    _require(line, 54)
    rest = line[30:54]
    values = []
    for _ in range(3):
        scanned = _scan_float(rest)
        if scanned is None:
            raise PdbError(f"could not read coordinates from line {line!r}")
        value, rest = scanned
        values.append(value)
    return values[0], values[1], values[2]


def residue_number(line: str) -> str:
    """The residue number with insertion code, such as ``"   1 "``."""
    _require(line, 22 + RES_NUMBER_LENGTH)
    return line[22:22 + RES_NUMBER_LENGTH]


def chain_label(line: str) -> str | None:
    """The one-character chain label, or ``None`` if the line is invalid."""
    if not line_check(line, 21):
        return None
    return line[21:22] or None


def alt_coord_label(line: str) -> str | None:
    """The alternate location indicator, or ``None`` if the line is invalid."""
    if not line_check(line, 16):
        return None
    return line[16:17] or None


def element_symbol(line: str) -> str:
    """The padded element symbol, such as ``" C"`` or ``"SE"``."""
    _require(line, 76 + SYMBOL_LENGTH)
    return line[76:76 + SYMBOL_LENGTH]


def occupancy(line: str) -> float | None:
    """The occupancy, or ``None`` if the line is invalid or the field is empty."""
    if line_check(line, 55):
        return get_double(line[54:], 6)
    return None


def bfactor(line: str) -> float | None:
    """The temperature factor, or ``None`` if the line is invalid or the field is empty."""
    if line_check(line, 61):
        return get_double(line[60:], 6)
    return None


def is_hydrogen(line: str) -> bool:
    """Whether the atom is hydrogen or deuterium.

    Uses the element symbol where it is present, otherwise the atom name.
    """
    symbol = line[76:78] if line_check(line, 76 + SYMBOL_LENGTH) else ""
    _require(line, 13)

    if symbol in (" H", " D"):
        return True
    if symbol != "  ":
        return False
    # no symbol: names such as "CD  " or "ND  " are not hydrogens
    first, second = line[12], line[13:14]
    if not (first == " " or "1" <= first <= "9"):
        return False
    return first in ("H", "D") or second in ("H", "D")


def model_ranges(pdb: TextIO) -> list[FileRange]:
    """File ranges of the MODEL entries of ``pdb``, from its current position.

    Returns an empty list when there are no MODEL records.
    """
    ranges: list[FileRange] = []
    n_end = 0
    last_pos = pdb.tell()
    while True:
        line = pdb.readline()
        if not line:
            break
        if line.startswith("MODEL"):
            ranges.append(FileRange(last_pos, -1))
        if line.startswith("ENDMDL"):
            n_end += 1
            if n_end != len(ranges):
                raise PdbError("mismatch between MODEL and ENDMDL in input")
            ranges[-1].end = pdb.tell()
        last_pos = pdb.tell()
    for model in ranges:
        if model.end < 0:
            model.end = last_pos
    return ranges


def chain_ranges(
    pdb: TextIO, model: FileRange, include_hetatm: bool = False
) -> list[FileRange]:
    """File ranges of the chains within ``model``.

    The first chain's range starts where the model starts, so that the
    MODEL record is kept.
    """
    chains: list[FileRange] = []
    last_chain: str | None = None
    last_pos = model.begin
    pdb.seek(model.begin)
    while True:
        line = pdb.readline()
        if not line or pdb.tell() >= model.end:
            break
        if line.startswith("ATOM") or (include_hetatm and line.startswith("HETATM")):
            chain = chain_label(line)
            if chain != last_chain:
                if chains:
                    chains[-1].end = last_pos
                chains.append(FileRange(last_pos, last_pos))
                last_chain = chain
        last_pos = pdb.tell()
    if chains:
        chains[-1].end = last_pos
        chains[0].begin = model.begin
    return chains


def _atoi(text: str) -> int:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _write_structure(output: TextIO, structure: Node) -> None:
    if structure.type is not NodeType.STRUCTURE:
        raise TypeError("expected a structure node")

    model = structure.model or 0
    output.write(f"MODEL     {model:4d}\n" if model > 0 else "MODEL        1\n")

    last_line: str | None = None
    last_res_name = last_res_number = last_chain = None
    for chain in structure:
        for residue in chain:
            for atom in residue:
                if atom.pdb_line is None:
                    raise PdbError("PDB input not valid or not present")
                total = atom.area.total if atom.area is not None else 0.0
                radius = atom.radius if atom.radius is not None else 0.0
                last_line = (
                    atom.pdb_line[:LINE_LENGTH][:54].ljust(54)
                    + f"{radius:6.2f}{total:6.2f}"
                )
                output.write(last_line + "\n")
            last_res_name = residue.name
            last_res_number = residue.residue_number
        last_chain = chain.name

    if last_line is None:
        raise PdbError("structure has no atoms")

    chain_char = (last_chain or " ")[0]
    output.write(
        f"TER   {_atoi(last_line[6:11]) + 1:5d}     {last_res_name or '':>4} "
        f"{chain_char}{last_res_number or '':>5}\nENDMDL\n"
    )
    output.flush()


def write_pdb(output: TextIO, root: Node) -> None:
    """Write the atoms of every structure in ``root`` as PDB records.

    The occupancy column holds the radius used and the temperature
    factor column the SASA of each atom.
    """
    if root.type is not NodeType.ROOT:
        raise TypeError("write_pdb needs the root of a result tree")
    output.write(f"REMARK 999 This PDB file was generated by {GENERATOR}.\n")
    output.write(
        "REMARK 999 In the ATOM records temperature factors have been\n"
        "REMARK 999 replaced by the SASA of the atom, and the occupancy\n"
        "REMARK 999 by the radius used in the calculation.\n"
    )
    for result in root:
        for structure in result:
            _write_structure(output, structure)
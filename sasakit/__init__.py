"""Solvent accessible surface areas, result trees, and PDB and RSA output."""

__version__ = "2.1.2"
__all__ = ["nb", "lee_richards", "shrake_rupley", "node", "pdb", "rsa"]
#!/usr/bin/env python3
"""
nth-brillouin - Command Line Entry Point

Builds the n-th Brillouin zone of a lattice and reports its boundary.

Usage:
    python -m nth_brillouin a00 a01 a02 a10 a11 a12 a20 a21 a22 [--zone N]
                            [--valence Z] [--plot] [--save FILE] [--verbose]

Example:
    # Second zone of the face-centred cubic lattice
    python -m nth_brillouin 0 0.5 0.5 0.5 0 0.5 0.5 0.5 0 --zone 2
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .bz_geometry import build
from .bz_loops import boundary_counts
from .bz_visualization import plot_zone_matplotlib, zone_loops
from .errors import BrillouinZoneError
from .lattice import fermi_sphere_radius, reciprocal_lattice
from .logger import setup_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nth-brillouin",
        description="Compute the n-th Brillouin zone of a crystal lattice.",
    )
    parser.add_argument("components", nargs=9, type=float, metavar="A",
                        help="primitive vectors a0, a1, a2 as nine numbers, row by row")
    parser.add_argument("--zone", type=int, default=1,
                        help="zone number, 1 to 3 (default: 1)")
    parser.add_argument("--valence", type=float, default=None,
                        help="valence electrons per cell; prints the Fermi sphere radius")
    parser.add_argument("--plot", action="store_true",
                        help="show the zone in a matplotlib window")
    parser.add_argument("--save", metavar="FILE", default=None,
                        help="save a matplotlib rendering of the zone to FILE")
    parser.add_argument("--verbose", action="store_true",
                        help="log construction details")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)
    logger = setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    lattice_vectors = np.reshape(args.components, (3, 3))
    try:
        reciprocal = reciprocal_lattice(lattice_vectors)
        poly = build(reciprocal, args.zone)
    except BrillouinZoneError as e:
        logger.error(f"Cannot build zone: {e}")
        return 2

    print("Reciprocal vectors:")
    for row in reciprocal:
        print("  " + " ".join(f"{c: .6f}" for c in row))

    counts = poly.summary()
    print(f"Zone {poly.zone_number}: {counts['faces']} faces, "
          f"{counts['edges']} edges, {counts['vertices']} vertices")

    boundary = boundary_counts(poly)
    print(f"Boundary: {boundary.faces} faces, {boundary.edges} edges, "
          f"{boundary.vertices} vertices")

    for face, loops in zone_loops(poly):
        normal = " ".join(f"{c: .4f}" for c in face.n)
        print(f"  face n=({normal}) a={face.a:.4f}: {len(loops)} loop(s)")

    if args.valence is not None:
        try:
            radius = fermi_sphere_radius(reciprocal, args.valence)
        except ValueError as e:
            logger.error(f"Cannot compute Fermi sphere: {e}")
            return 2
        print(f"Fermi sphere radius: {radius:.6f}")

    if args.plot or args.save:
        import matplotlib.pyplot as plt

        fig, _ = plot_zone_matplotlib(poly)
        if args.save:
            fig.savefig(args.save)
            logger.info(f"Saved rendering to {args.save}")
        if args.plot:
            plt.show()
        plt.close(fig)

    return 0


if __name__ == "__main__":
    sys.exit(main())

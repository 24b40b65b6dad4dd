#!/usr/bin/env python
# -*-coding:utf8-*-

# cli.py: command-line interface
# Copyright (C) 2023  Isaac Ren
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import argparse
import logging
import sys

import matplotlib
import matplotlib.pyplot as plt

from .computation import compute, compute_bounds, query_barcodes
from .config import InputParameters
from .draw import draw_betti_numbers
from .errors import InputError
from .io import (is_module_invariants_file, read_input, read_module_invariants, read_query_file,
                 write_module_invariants)
from .logging_config import setup_logging
from .output import format_bounds, format_grades, print_barcodes, print_betti, print_minimal_presentation
from .progress import ConsoleSink, Progress

PROG = "augarr"

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Compute the augmented arrangement of a bifiltration: its multigraded Betti
numbers and the barcode templates of all the lines of nonnegative slope. The
arrangement is saved in a module invariants file, which can then be queried
for the bounds of the module and for the barcodes along given lines."""

EPILOG = """\
A line file lists one query line per row as "angle offset": the angle is in
degrees between 0 and 90, and the offset is the signed distance from the line
to the origin, positive when the line passes above or to the left of the
origin. Lines starting with # and blank lines are skipped. For each query,
one line "angle offset: birth death xmultiplicity, ..." is printed."""


def build_parser():
    parser = argparse.ArgumentParser(prog=PROG, description=DESCRIPTION, epilog=EPILOG,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("input_file",
        help="bifiltration or FIRep file, or module invariants file for --bounds and --barcodes.",
        metavar="INPUT")
    parser.add_argument("output_file",
        nargs="?",
        help="module invariants file to write.",
        metavar="OUTPUT")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--minpres",
        action="store_true",
        help="print the minimal presentation, then exit.")
    mode.add_argument("-b", "--betti",
        action="store_true",
        help="print the dimensions and Betti numbers, then exit. If OUTPUT is \
given, the Betti numbers are also saved there, without barcode templates.")
    mode.add_argument("--bounds",
        action="store_true",
        help="print the bounds of the module in a module invariants file, then exit.")
    mode.add_argument("--barcodes",
        action="store",
        help="print the barcodes of the query lines in the given file, then exit.",
        metavar="LINE_FILE")
    parser.add_argument("-H", "--homology",
        action="store",
        type=int,
        default=0,
        help="degree of homology to compute. Default is 0.",
        metavar="n")
    parser.add_argument("-k", "--koszul",
        action="store_true",
        help="compute the Betti numbers from Koszul homology instead of a \
minimal presentation.")
    parser.add_argument("--num-threads",
        action="store",
        type=int,
        default=0,
        help="maximal number of threads; 0 lets Python decide. Default is 0.",
        metavar="n")
    parser.add_argument("-V", "--verbosity",
        action="store",
        type=int,
        default=0,
        help="verbosity from 0 (only warnings) to 10. Default is 0.",
        metavar="n")
    parser.add_argument("--xlabel",
        action="store",
        help="name of the parameter along the x-axis.",
        metavar="label")
    parser.add_argument("--ylabel",
        action="store",
        help="name of the parameter along the y-axis.",
        metavar="label")
    parser.add_argument("-x", "--xbins",
        action="store",
        type=int,
        default=0,
        help="number of bins along the x-axis; 0 for no binning. Default is 0.",
        metavar="n")
    parser.add_argument("-y", "--ybins",
        action="store",
        type=int,
        default=0,
        help="number of bins along the y-axis; 0 for no binning. Default is 0.",
        metavar="n")
    parser.add_argument("--xreverse",
        action="store_true",
        help="reverse the direction of the x-axis of a bifiltration.")
    parser.add_argument("--yreverse",
        action="store_true",
        help="reverse the direction of the y-axis of a bifiltration.")
    parser.add_argument("-d", "--draw",
        action="store_true",
        help="draw the Betti numbers, the minimal presentation unless --koszul \
is given, and the arrangement.")
    parser.add_argument("-f", "--save-fig",
        action="store",
        help="save the drawing to the specified file.",
        metavar="filename")
    return parser


def _parameters(args):
    return InputParameters(
        input_file=args.input_file,
        output_file=args.output_file,
        hom_degree=args.homology,
        koszul=args.koszul,
        num_threads=args.num_threads,
        verbosity=args.verbosity,
        minpres=args.minpres,
        betti=args.betti,
        bounds=args.bounds,
        barcodes_file=args.barcodes,
        x_label=args.xlabel or "x",
        y_label=args.ylabel or "y",
        x_bins=args.xbins,
        y_bins=args.ybins,
        x_reverse=args.xreverse,
        y_reverse=args.yreverse)


def _draw(result, save_fig=None, show=False):
    matplotlib.rcParams['toolbar'] = 'None'
    extras = [item for item in (result.presentation, result.arrangement) if item is not None]
    n_axes = 3 + len(extras)
    fig = plt.figure(figsize=(3 * n_axes, 3), layout="tight")
    ax = fig.subplots(nrows=1, ncols=n_axes, squeeze=True)
    draw_betti_numbers(ax[:3], result.template_points, result.x_label, result.y_label)
    for axis, item in zip(ax[3:], extras):
        item.draw(axis)

    if save_fig is not None:
        plt.savefig(save_fig, dpi=300)
    if show:
        plt.show()
    plt.close(fig)


def run(params, draw=False, save_fig=None, progress=None):
    """
    Run a computation or a query as described by the parameters.

    Returns
    -------
    result: ComputationResult
    """
    if params.bounds or params.barcodes_file is not None:
        if not is_module_invariants_file(params.input_file):
            raise InputError("this function requires a module invariants file as input")
        result = read_module_invariants(params.input_file)
        if result.parameters is not None:
            logger.info("module invariants computed with %r", result.parameters)
        if params.bounds:
            print(format_bounds(compute_bounds(result)))
        else:
            queries = read_query_file(params.barcodes_file)
            print_barcodes(queries, query_barcodes(result, queries, params.num_threads))
        return result

    if is_module_invariants_file(params.input_file):
        raise InputError("this function requires a bifiltration file, not a module invariants file")
    filtration = read_input(params.input_file, params.hom_degree)
    if params.x_label != "x":
        filtration.x_label = params.x_label
    if params.y_label != "y":
        filtration.y_label = params.y_label

    result = compute(filtration, use_koszul=params.koszul, hom_degree=params.hom_degree,
                     num_threads=params.num_threads, progress=progress,
                     with_arrangement=not (params.minpres or params.betti),
                     x_bins=params.x_bins, y_bins=params.y_bins,
                     x_reverse=params.x_reverse, y_reverse=params.y_reverse)
    result.parameters = params
    if params.minpres:
        print(format_grades(result.template_points.x_grades, result.template_points.y_grades))
        print_minimal_presentation(result.presentation)
    elif params.betti:
        print_betti(result.template_points)
    else:
        logger.info("computation complete, arrangement: %r", result.arrangement)

    if params.output_file and params.output_file != params.input_file and not params.minpres:
        write_module_invariants(params.output_file, result)
    if draw or save_fig is not None:
        _draw(result, save_fig, draw)
    return result


def main(argv=None):
    """
    Run the argument parser for the command-line interface.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        params = _parameters(args)
    except InputError as error:
        parser.error(str(error))

    setup_logging(params.log_level)
    progress = Progress(ConsoleSink()) if params.verbosity > 0 else Progress()
    try:
        run(params, draw=args.draw, save_fig=args.save_fig, progress=progress)
    except InputError as error:
        print(f"INPUT ERROR: {error} :END", file=sys.stderr)
        return 1
    except OSError as error:
        logger.error("%s", error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python

"""
Extracts the composite image from a Paintstorm Studio document and writes it
as a PPM image to standard output.
"""

import argparse
import logging
import sys

from pss_header import PSSError
from pss_raster import write_placeholder, write_ppm
from pss_rle import read_and_decompress_pss_data

log = logging.getLogger(__name__)

FORMAT_INFO = """\
This program extracts composite image from Paintstorm Studio document
and writes it as PPM image to standard output.
It can then be converted using imagemagick or netpbm in desired format.
   ***
 PSS format info:
* first 40 bytes of file is a software specific header,
* it is followed by RLE information block,
* after it is a RLE 24 bit RGB image array
   ***
Example usage: pssthumb <file> > <output>.ppm
               pssthumb <file> | ppmtojpeg > <output>.jpg
"""


def maketheparser():
    parser = argparse.ArgumentParser(
        prog="pssthumb",
        description=__doc__,
        add_help=True,
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Paintstorm Studio document to read.",
    )
    parser.add_argument(
        "--outfile",
        "-o",
        type=str,
        default="-",
        help="Path to file where output is written. Or \"-\" (default) to "
        "write to stdout.",
    )
    parser.add_argument(
        "--debug",
        "-d",
        default=False,
        action="store_true",
        help="Use debug logging level.",
    )
    return parser


def convert(file_path, outfp):
    """
    Decode `file_path` and write it to `outfp`, or the placeholder image on
    failure.

    Returns:
        0 on success, 1 when the placeholder was written
    """
    try:
        image = read_and_decompress_pss_data(file_path)
    except PSSError as e:
        log.error("%s", e)
        write_placeholder(outfp)
        return 1

    write_ppm(image, outfp)
    return 0


def main(args=None):
    P = maketheparser()
    A = P.parse_args(args=args)

    logging.basicConfig(format="%(levelname)s: %(message)s", stream=sys.stderr)
    if A.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if A.file is None:
        sys.stderr.write(FORMAT_INFO)
        return 0

    if A.outfile == "-":
        return convert(A.file, sys.stdout)

    with open(A.outfile, "w", encoding="ascii", newline="\n") as outfp:
        return convert(A.file, outfp)


if __name__ == "__main__":
    sys.exit(main())

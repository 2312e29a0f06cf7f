#!/usr/bin/env python3
"""
Create a CSV file detailing tagging changes in an OSM file.

Every row is one tag which changed between two consecutive versions of an
OSM object. With a .osh.pbf history file the full history is output, regular
(non-history) files can be processed too.

Usage:
    osm-tag-csv-history -i input.osh.pbf -o output.csv.gz
    osm-tag-csv-history -i input.osh.pbf -o - -t highway --uid 1234
"""

import argparse
import csv
import gzip
import io
import logging
import os
import sys
from contextlib import contextmanager

from .changesets import ChangesetTagLookup
from .columns import Column, default_columns, needs_changesets, parse_columns
from .diff import TagHistoryDiffer
from .errors import ConfigurationError, TagHistoryError
from .filters import ChangeFilter
from .rows import RowFormatter
from .source import TagHistoryHandler


def configure_logging(verbosity):
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='[%(levelname)s] %(message)s')


def output_is_gzip(output_path, compression):
    """Decide whether to gzip the output, based on --compression and the filename."""
    if compression == "gzip":
        return True
    if compression == "none":
        return False
    if output_path == "-":
        logging.debug("Output is '-', no compression")
        return False
    if output_path.endswith(".csv.gz"):
        logging.debug("Output file ends with .csv.gz so using regular gzip")
        return True
    if output_path.endswith(".csv"):
        logging.debug("Output file ends with .csv so no compression")
        return False
    raise ConfigurationError(f"Cannot auto-detect output compression format: {output_path!r}")


@contextmanager
def open_output(output_path, compression="auto"):
    """Open the output (a file or '-' for stdout) as a text stream for the csv module."""
    use_gzip = output_is_gzip(output_path, compression)
    if output_path == "-":
        raw = sys.stdout.buffer
    else:
        raw = open(output_path, "wb")

    stream = gzip.GzipFile(fileobj=raw, mode="wb") if use_gzip else raw
    text = io.TextIOWrapper(stream, encoding="utf-8", newline="")
    try:
        yield text
    finally:
        text.flush()
        text.detach()
        if use_gzip:
            stream.close()
        if output_path == "-":
            raw.flush()
        else:
            raw.close()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="osm-tag-csv-history",
        description="Create a CSV file detailing tagging changes in an OSM file",
    )
    parser.add_argument("-i", "--input", required=True, metavar="INPUT.osh.pbf",
                        help="Read OSM data from this file. If it's a .osh.pbf history file, "
                             "the full history will be output")
    parser.add_argument("-o", "--output", required=True, metavar="OUTPUT.csv[.gz]",
                        help="Where to write the output. Use - for stdout")
    parser.add_argument("-v", dest="verbosity", action="count", default=0,
                        help="Increase verbosity")

    header = parser.add_mutually_exclusive_group()
    header.add_argument("--header", dest="header", action="store_true", default=True,
                        help="Include a CSV header (default)")
    header.add_argument("--no-header", dest="header", action="store_false",
                        help="Do not include a CSV header")

    parser.add_argument("-c", "--compression", choices=["none", "auto", "gzip"], default="auto",
                        help="none = don't compress the output, gzip = always gzip, "
                             "auto (default) = gzip if the output filename ends in .gz")
    parser.add_argument("--log-frequency", type=float, default=10.0, metavar="SEC",
                        help="with -v, how often (in sec.) to print progress messages")
    parser.add_argument("--timestamp-format", choices=["datetime", "epoch_time"],
                        default="datetime",
                        help="What format to use for time column in output file?")
    parser.add_argument("--columns", metavar="COL,COL,...",
                        help="Comma separated list of output columns, e.g. "
                             "key,value,value_count_delta,id,datetime")

    parser.add_argument("-t", "--tag", dest="tags", action="append", default=[], metavar="TAG",
                        help="Only include changes to this tag (can be specified multiple times)")
    parser.add_argument("--tag-value", dest="tag_values", action="append", default=[],
                        metavar="KEY=VALUE",
                        help="Only include changes to this tag where the old or new value "
                             "is VALUE (can be specified multiple times)")
    parser.add_argument("--uid", dest="uids", action="append", default=[], type=int,
                        metavar="USERID",
                        help="Only include changes made by this OSM user (by userid)")
    parser.add_argument("--object-type", dest="object_types", action="append", default=[],
                        choices=["node", "way", "relation", "n", "w", "r"],
                        help="Only include changes to this type of object")

    parser.add_argument("--changesets", dest="changeset_filename",
                        metavar="changesets.sqlite",
                        help="Filename of the changeset tag database")
    parser.add_argument("-C", "--changeset-tag", dest="changeset_tags", action="append",
                        default=[], metavar="TAG",
                        help="Include a column called changeset_TAG with this changeset tag. "
                             "Requires --changesets. Can be given multiple times")
    return parser


def columns_from_args(args):
    if args.columns:
        columns = parse_columns(args.columns)
        columns.extend(Column.changeset_tag(tag) for tag in args.changeset_tags)
        return columns
    return default_columns(args.timestamp_format, args.changeset_tags)


def run(args):
    columns = columns_from_args(args)
    if args.changeset_tags and not args.changeset_filename:
        raise ConfigurationError("--changeset-tag requires --changesets")
    if needs_changesets(columns) and not args.changeset_filename:
        raise ConfigurationError("Changeset tag columns require --changesets")

    change_filter = ChangeFilter.build(
        uids=args.uids,
        object_kinds=args.object_types,
        keys=args.tags,
        key_values=args.tag_values,
    )
    if change_filter.active:
        logging.info(f"Only including changes with {change_filter.describe()}")

    if not os.path.exists(args.input):
        raise ConfigurationError(f"Input file not found: {args.input}")

    lookup = None
    if args.changeset_filename:
        lookup = ChangesetTagLookup.from_filename(args.changeset_filename)
        changeset_headers = [c.header for c in columns if c.tag is not None]
        logging.info(f"Including {len(changeset_headers)} changeset tag column(s): {changeset_headers}")

    try:
        formatter = RowFormatter(columns, lookup)
        logging.info(f"Beginning processing of {args.input}")
        logging.info(f"Output will be written to: {args.output}")
        with open_output(args.output, args.compression) as out:
            writer = csv.writer(out, lineterminator="\n")
            if args.header:
                writer.writerow(formatter.header)
            handler = TagHistoryHandler(
                TagHistoryDiffer(change_filter), formatter, writer, args.log_frequency
            )
            handler.run(args.input)
    finally:
        if lookup is not None:
            lookup.close()


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbosity)

    try:
        run(args)
    except (TagHistoryError, OSError) as e:
        logging.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()

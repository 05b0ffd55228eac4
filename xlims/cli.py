# Copyright (C) 2025  Technische Universitaet Berlin
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 3 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
# USA

"""Command line entry point for searching crosslinks in LC-IMS-MS data."""
import argparse
import sys
from xlims import const
from xlims import xl_logging
from xlims.config import Config, ConfigReader
from xlims.fasta import read_proteins
from xlims.output_format import write_results, write_crosslinks
from xlims.readers import read_features, read_peaks
from xlims.search import run_search
from xlims.xl_logging import log

DEFAULT_PPM = 20


def build_parser():
    parser = argparse.ArgumentParser(
        prog='xlims', description='Search crosslinked peptides in LC-IMS-MS features')

    proteins = parser.add_mutually_exclusive_group(required=True)
    proteins.add_argument('--fasta', help='FASTA file with the protein sequence(s)')
    proteins.add_argument('--sequence', action='append',
                          help='protein sequence (can be given multiple times)')

    parser.add_argument('--features', required=True, help='LC-IMS-MS feature file')
    parser.add_argument('--peaks', required=True, help='isotopic peak file')
    parser.add_argument('--output', default='crossLinkResults.csv', help='result csv file')
    parser.add_argument('--crosslinks-out', help='also write the theoretical crosslinks here')
    parser.add_argument('--config', help='JSON or YAML config file')

    parser.add_argument('--ppm', type=float,
                        help='mass tolerance in ppm (default %d)' % DEFAULT_PPM)
    parser.add_argument('--max-missed-cleavages', type=int, help='missed cleavages (default 1)')
    parser.add_argument('--digestion', choices=('full', 'partial', 'none'),
                        help='digestion rule (default full)')
    parser.add_argument('--no-c13', action='store_true', help='peptides are not 13C labelled')
    parser.add_argument('--no-n15', action='store_true', help='peptides are not 15N labelled')
    parser.add_argument('--static-delta-mass', type=float,
                        help='constant mass shift added to the label shift')
    parser.add_argument('--threads', type=int, help='number of processes to search with')

    parser.add_argument('--log-file', help='also write the log to this file')
    parser.add_argument('--quiet', action='store_true', help='only report errors')
    parser.add_argument('--version', action='version', version='%(prog)s ' + const.VERSION)
    return parser


def config_from_args(args):
    """
    Create the search Config from a config file (if given) and command line overrides.

    :param args: (argparse.Namespace) parsed command line
    :return: (Config)
    """
    settings = ConfigReader.load_settings(args.config) if args.config else {}

    if args.ppm is not None:
        settings['ms1_tol'] = '%s ppm' % args.ppm
    elif 'ms1_tol' not in settings:
        settings['ms1_tol'] = '%s ppm' % DEFAULT_PPM

    if args.threads is not None:
        settings['threads'] = args.threads

    digestion = settings.setdefault('digestion', {})
    if args.max_missed_cleavages is not None:
        digestion['missed_cleavages'] = args.max_missed_cleavages
    if args.digestion is not None:
        digestion['specificity'] = args.digestion

    labeling = settings.setdefault('labeling', {})
    if args.no_c13:
        labeling['use_c13'] = False
    if args.no_n15:
        labeling['use_n15'] = False
    if args.static_delta_mass is not None:
        labeling['static_delta_mass'] = args.static_delta_mass

    return Config(**settings)


def load_proteins(args, config):
    if args.fasta:
        return read_proteins(args.fasta, config.fasta)
    return [('protein%d' % (i + 1), s.strip().upper()) for i, s in enumerate(args.sequence)]


def main(argv=None):
    """
    Run a search from the command line.

    :return: (int) exit status, 0 on success and 1 on configuration or input errors
    """
    args = build_parser().parse_args(argv)

    xl_logging.log_enable(not args.quiet)
    xl_logging.progress_enable(not args.quiet and sys.stdout.isatty())
    if args.log_file:
        xl_logging.log_file(args.log_file)

    try:
        config = config_from_args(args)
        log("Using xlims version %s" % const.VERSION)
        log("Mass tolerance %s ppm, %s digestion with %d missed cleavages" % (
            config.ms1_ppm, config.digestion.specificity, config.digestion.missed_cleavages))

        proteins = load_proteins(args, config)
        log("Reading features from %s" % args.features)
        features = read_features(args.features)
        log("Reading peaks from %s" % args.peaks)
        peaks = read_peaks(args.peaks)

        crosslinks, results = run_search(config, proteins, features, peaks)

        if args.crosslinks_out:
            log("Writing %d theoretical crosslinks to %s" % (len(crosslinks),
                                                              args.crosslinks_out))
            write_crosslinks(crosslinks, args.crosslinks_out)
        log("Writing results to %s" % args.output)
        write_results(results, args.output)
    # UnknownResidueError is a KeyError, InputFormatError a ValueError
    except (ValueError, KeyError, TypeError, AttributeError, OSError) as e:
        xl_logging.log_enable(True)
        log("ERROR: %s" % e)
        return 1
    finally:
        if args.log_file:
            xl_logging.log_file(False)
    return 0


if __name__ == '__main__':
    sys.exit(main())

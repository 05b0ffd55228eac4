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

"""
Search theoretical crosslinks in LC-IMS-MS data.

A crosslink is matched to every feature within the ms1 tolerance. For each LC scan of such a
feature the isotope envelopes of the labelled (shifted) variants of the crosslink are looked
for among the peaks of the feature's IMS scan.
"""
from multiprocessing import Pool
from xlims.crosslinks import generate_crosslinks, sort_crosslinks
from xlims.detectors import TargetedFeatureFinder
from xlims.digestion import digest
from xlims.isotopes import search_envelope, SearchState
from xlims.lookup import FeatureTable, PeakTable
from xlims.utils import get_chunks, resolve_threads
from xlims.xl_logging import log, ProgressBar


class MassShiftResult:
    """Shifted masses searched for one crosslink, feature and LC scan and whether each was found."""

    def __init__(self, entries=None):
        self.entries = [] if entries is None else list(entries)

    def add(self, mass, found):
        self.entries.append((mass, bool(found)))

    @property
    def n_found(self):
        """Number of shifted masses that were found."""
        return sum(1 for _, found in self.entries if found)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __eq__(self, other):
        if not isinstance(other, MassShiftResult):
            return NotImplemented
        return self.entries == other.entries

    def __hash__(self):
        return hash(tuple(self.entries))

    def __repr__(self):
        return "MassShiftResult(%r)" % self.entries


class CrossLinkResult:
    """Outcome of searching one crosslink in one LC scan of one feature."""

    def __init__(self, crosslink, feature, scan_lc, mass_shift_result):
        """
        Initialise the CrossLinkResult.

        :param crosslink: (CrossLink) the searched crosslink
        :param feature: (numpy.void, dtypes.features) the matched feature
        :param scan_lc: (int) LC scan that was searched
        :param mass_shift_result: (MassShiftResult) shifted masses and whether they were found
        """
        self.crosslink = crosslink
        self.feature = feature
        self.scan_lc = scan_lc
        self.mass_shift_result = mass_shift_result


def shifted_masses(crosslink, feature_mass):
    """
    Masses of the labelled variants of a crosslink at the mass of a feature.

    Single peptides have one variant. Two peptides have three: first peptide labelled, second
    peptide labelled and both labelled.
    """
    shifts = crosslink.mass_shifts
    if len(shifts) == 1:
        return [feature_mass + shifts[0]]
    return [feature_mass + shifts[0], feature_mass + shifts[1],
            feature_mass + shifts[0] + shifts[1]]


class CrossLinkSearcher:
    """Match crosslinks against sorted feature and peak tables."""

    def __init__(self, config, detector=None):
        """
        Initialise the CrossLinkSearcher.

        :param config: (Config) search config
        :param detector: (BaseIsotopeDetector) defaults to a TargetedFeatureFinder
        """
        self.config = config
        self.detector = TargetedFeatureFinder() if detector is None else detector

    def search_crosslink(self, crosslink, feature_table, peak_table):
        """
        Search a single crosslink.

        :param crosslink: (CrossLink) crosslink to search
        :param feature_table: (FeatureTable) features sorted by mass
        :param peak_table: (PeakTable) peaks sorted by scans and m/z
        :return: (list of CrossLinkResult) one result per matching feature and LC scan
        """
        isotope_config = self.config.isotope_config
        results = []
        for feature in feature_table.match(crosslink.mass, self.config.ms1_ppm):
            charge = int(feature['charge'])
            for scan_lc in range(int(feature['scan_lc_start']), int(feature['scan_lc_end']) + 1):
                candidate_peaks = peak_table.candidate_peaks(
                    scan_lc, int(feature['scan_ims_rep']), feature['mz'])

                mass_shift_result = MassShiftResult()
                for mass in shifted_masses(crosslink, float(feature['mass'])):
                    state, _ = search_envelope(
                        self.detector, candidate_peaks, mass, charge,
                        isotope_config.tolerance,
                        spacing=isotope_config.isotope_spacing,
                        satellite_peaks=isotope_config.satellite_peaks)
                    mass_shift_result.add(mass, state == SearchState.FOUND)

                results.append(CrossLinkResult(crosslink, feature, scan_lc, mass_shift_result))
        return results

    def search(self, crosslinks, features, peaks):
        """
        Search crosslinks in ascending mass order.

        :param crosslinks: (iterable of CrossLink) crosslinks to search
        :param features: (FeatureTable|ndarray) features
        :param peaks: (PeakTable|ndarray) isotopic peaks
        :return: (list of CrossLinkResult)
        """
        crosslinks = sort_crosslinks(crosslinks)
        feature_table = features if isinstance(features, FeatureTable) else FeatureTable(features)
        peak_table = peaks if isinstance(peaks, PeakTable) else PeakTable(peaks)

        threads = resolve_threads(self.config.threads)
        if threads == 1 or len(crosslinks) < 2:
            return self._search_serial(crosslinks, feature_table, peak_table)
        return self._search_parallel(crosslinks, feature_table, peak_table, threads)

    def _search_serial(self, crosslinks, feature_table, peak_table):
        results = []
        progress = ProgressBar("Searching crosslinks", len(crosslinks))
        for crosslink in crosslinks:
            results += self.search_crosslink(crosslink, feature_table, peak_table)
            progress.next()
        progress.finish()
        return results

    def _search_parallel(self, crosslinks, feature_table, peak_table, threads):
        # contiguous chunks keep the mass order when concatenated
        chunk_size = max(1, len(crosslinks) // (threads * 4))
        chunks = [crosslinks[s] for _, _, s in get_chunks(len(crosslinks), chunk_size)]

        results = []
        progress = ProgressBar("Searching crosslinks (%d processes)" % threads, len(crosslinks))
        with Pool(threads, initializer=_init_worker,
                  initargs=(self, feature_table, peak_table)) as pool:
            for chunk, chunk_results in zip(chunks, pool.imap(_search_chunk, chunks)):
                results += chunk_results
                progress.next(len(chunk))
        progress.finish()
        return results


# searcher and tables of a worker process
_worker_state = None


def _init_worker(searcher, feature_table, peak_table):
    global _worker_state
    _worker_state = (searcher, feature_table, peak_table)


def _search_chunk(crosslinks):
    searcher, feature_table, peak_table = _worker_state
    results = []
    for crosslink in crosslinks:
        results += searcher.search_crosslink(crosslink, feature_table, peak_table)
    return results


def build_crosslinks(config, proteins):
    """
    Digest proteins and enumerate their crosslinks.

    :param config: (Config) search config
    :param proteins: (iterable of (str, str)) protein id and sequence pairs
    :return: (list of CrossLink) unique crosslinks sorted by mass
    """
    crosslinks = set()
    for protein_id, sequence in proteins:
        peptides = digest(sequence, protein_id, config.digestion)
        log("%s: %d peptides (%s digestion, %d missed cleavages)" % (
            protein_id, len(peptides), config.digestion.specificity,
            config.digestion.missed_cleavages))
        protein_crosslinks = generate_crosslinks(peptides, sequence, protein_id, config)
        log("%s: %d theoretical crosslinks" % (protein_id, len(protein_crosslinks)))
        crosslinks |= protein_crosslinks
    return sort_crosslinks(crosslinks)


def run_search(config, proteins, features, peaks, detector=None):
    """
    Run the complete search.

    :param config: (Config) search config
    :param proteins: (iterable of (str, str)) protein id and sequence pairs
    :param features: (ndarray, dtypes.features) LC-IMS-MS features
    :param peaks: (ndarray, dtypes.isotopic_peaks) isotopic peaks
    :param detector: (BaseIsotopeDetector) optional detector replacing the default
    :return: (list of CrossLink, list of CrossLinkResult)
    """
    crosslinks = build_crosslinks(config, proteins)

    log("Sorting %d features and %d peaks" % (len(features), len(peaks)))
    feature_table = FeatureTable(features)
    peak_table = PeakTable(peaks)

    results = CrossLinkSearcher(config, detector).search(crosslinks, feature_table, peak_table)
    n_found = sum(1 for r in results if r.mass_shift_result.n_found > 0)
    log("%d results, %d with at least one shifted mass found" % (len(results), n_found))
    return crosslinks, results

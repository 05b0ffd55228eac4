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
Sorted in-memory tables of LC-IMS-MS features and isotopic peaks.

Both tables are sorted once on construction and afterwards only queried with range lookups.
"""
import numpy as np
from xlims import dtypes
from xlims.const import PPM_DIVISOR


def range_match(sorted_keys, low, high):
    """
    Find the rows of a sorted array whose key lies in [low, high].

    :param sorted_keys: (ndarray) ascending keys
    :param low: lower limit (inclusive)
    :param high: upper limit (inclusive)
    :return: (int, int) start and end index, the matching rows are sorted_keys[start:end]
    """
    start = np.searchsorted(sorted_keys, low, side='left')
    end = np.searchsorted(sorted_keys, high, side='right')
    # an inverted range (low > high) matches nothing
    return int(start), int(max(start, end))


def ppm_tolerance(mass, ppm):
    """Absolute tolerance (Dalton) of ppm parts per million at the given mass."""
    return ppm * mass / PPM_DIVISOR


class FeatureTable:
    """Features sorted by monoisotopic mass."""

    def __init__(self, features):
        """
        Initialise the FeatureTable.

        :param features: (ndarray, dtypes.features) features in any order
        """
        features = np.asarray(features, dtype=dtypes.features)
        order = np.argsort(features['mass'], kind='stable')
        self.features = features[order]
        self.masses = self.features['mass']

    def __len__(self):
        return len(self.features)

    def match(self, mass, ppm):
        """
        Return all features within ppm of a mass.

        :param mass: (float) theoretical mass
        :param ppm: (float) tolerance in parts per million of mass
        :return: (ndarray, dtypes.features) matching features in ascending mass order
        """
        tol = ppm_tolerance(mass, ppm)
        start, end = range_match(self.masses, mass - tol, mass + tol)
        return self.features[start:end]


class PeakTable:
    """
    Isotopic peaks sorted by LC scan, then IMS scan, then m/z.

    Peaks of one (LC scan, IMS scan) pair form a contiguous block. The blocks are located via a
    single integer key per peak (scan_lc * stride + scan_ims) and the m/z range inside the
    block via the sorted m/z values.
    """

    def __init__(self, peaks):
        """
        Initialise the PeakTable.

        :param peaks: (ndarray, dtypes.isotopic_peaks) peaks in any order
        """
        peaks = np.asarray(peaks, dtype=dtypes.isotopic_peaks)
        order = np.lexsort((peaks['mz'], peaks['scan_ims'], peaks['scan_lc']))
        self.peaks = peaks[order]
        if len(self.peaks) > 0:
            self._stride = int(self.peaks['scan_ims'].max()) + 2
        else:
            self._stride = 1
        self._scan_keys = self._scan_key(self.peaks['scan_lc'], self.peaks['scan_ims'])

    def __len__(self):
        return len(self.peaks)

    def _scan_key(self, scan_lc, scan_ims):
        return np.asarray(scan_lc, dtype=np.int64) * self._stride + \
            np.asarray(scan_ims, dtype=np.int64)

    def scan_block(self, scan_lc, scan_ims):
        """Return the (start, end) index range of the peaks of one LC and IMS scan."""
        if scan_ims < 0 or scan_ims >= self._stride:
            return 0, 0
        key = self._scan_key(scan_lc, scan_ims)
        return range_match(self._scan_keys, key, key)

    def candidate_peaks(self, scan_lc, scan_ims, min_mz):
        """
        Return the peaks of a single LC and IMS scan with an m/z of at least min_mz.

        :param scan_lc: (int) LC scan
        :param scan_ims: (int) IMS scan
        :param min_mz: (float) lower m/z limit (inclusive)
        :return: (ndarray, dtypes.isotopic_peaks) peaks in ascending m/z order
        """
        start, end = self.scan_block(scan_lc, scan_ims)
        block = self.peaks[start:end]
        mz_start = np.searchsorted(block['mz'], min_mz, side='left')
        return block[mz_start:]

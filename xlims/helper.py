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

"""Test helper utilities for xlims."""
import numpy as np
from xlims import dtypes
from xlims.const import PROTON_MASS
from xlims.detectors import BaseIsotopeDetector, IsotopicProfile


class RecordingDetector(BaseIsotopeDetector):
    """
    A detector for testing purposes that records every envelope it is asked about.

    Parameters:
        outcomes (list of bool, optional): consumed one per call, True means the envelope is
            found. Once exhausted nothing is found.
    """

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.envelopes = []

    def find_profile(self, candidate_peaks, envelope, tolerance_ppm):
        self.envelopes.append(envelope)
        if self.outcomes and self.outcomes.pop(0):
            return IsotopicProfile(peaks=candidate_peaks[:0], mono_mass=envelope.mono_mass,
                                   mono_mz=envelope.mono_mz, charge=envelope.charge)
        return None


def make_features(rows):
    """Create a feature array from (feature_id, mass, charge, scan_start, scan_end, ims) rows."""
    features = np.zeros(len(rows), dtype=dtypes.features)
    for i, (feature_id, mass, charge, scan_start, scan_end, ims) in enumerate(rows):
        features['feature_id'][i] = feature_id
        features['mass'][i] = mass
        features['charge'][i] = charge
        features['scan_lc_start'][i] = scan_start
        features['scan_lc_end'][i] = scan_end
        features['scan_lc_rep'][i] = scan_start
        features['scan_ims_rep'][i] = ims
        features['drift_time'][i] = 12.5
        features['abundance'][i] = 1000.0
    features['mz'] = features['mass'] / features['charge'] + PROTON_MASS
    return features


def make_peaks(rows):
    """Create a peak array from (scan_lc, scan_ims, mz, intensity) rows."""
    return np.array([tuple(r) for r in rows], dtype=dtypes.isotopic_peaks)


def create_fasta(sequences, file_path):
    """Create a FASTA file from sequences."""
    with open(file_path, 'w') as file:
        for i, sequence in enumerate(sequences):
            file.write(f'>sp|exampleP{i}|{sequence}\n')
            file.write(f'{sequence}\n')

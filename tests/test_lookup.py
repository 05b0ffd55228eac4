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
import numpy as np
from xlims.helper import make_features, make_peaks
from xlims.lookup import range_match, ppm_tolerance, FeatureTable, PeakTable


def test_range_match():
    keys = np.array([1.0, 2.0, 2.0, 3.0, 5.0])
    assert range_match(keys, 2.0, 3.0) == (1, 4)
    assert range_match(keys, 0.0, 0.5) == (0, 0)
    assert range_match(keys, 6.0, 7.0) == (5, 5)
    assert range_match(keys, 4.0, 4.5) == (4, 4)
    # inverted range
    assert range_match(keys, 3.0, 2.0) == (3, 3)


def test_ppm_tolerance():
    assert ppm_tolerance(1000000.0, 20) == 20.0
    assert ppm_tolerance(1000.0, 10) == 0.01


def test_feature_table_match():
    mass = 1500.0
    tol = ppm_tolerance(mass, 20)
    features = make_features([
        (1, mass + 2 * tol, 2, 10, 12, 50),
        (2, mass - tol, 2, 10, 12, 50),
        (3, mass, 3, 10, 12, 50),
        (4, mass + tol, 2, 10, 12, 50),
        (5, 800.0, 1, 10, 12, 50),
    ])
    table = FeatureTable(features)
    assert len(table) == 5
    assert list(table.masses) == sorted(features['mass'])

    matched = table.match(mass, 20)
    # both limits are inclusive
    assert list(matched['feature_id']) == [2, 3, 4]
    assert len(table.match(1000.0, 20)) == 0


def test_feature_table_empty():
    table = FeatureTable(make_features([]))
    assert len(table) == 0
    assert len(table.match(1000.0, 20)) == 0


def test_peak_table():
    peaks = make_peaks([
        (11, 50, 501.5, 10.0),
        (10, 50, 502.0, 20.0),
        (10, 50, 500.0, 30.0),
        (10, 51, 500.5, 40.0),
        (11, 49, 600.0, 50.0),
    ])
    table = PeakTable(peaks)
    assert len(table) == 5

    start, end = table.scan_block(10, 50)
    assert end - start == 2
    assert list(table.peaks['mz'][start:end]) == [500.0, 502.0]

    assert list(table.candidate_peaks(10, 50, 0)['mz']) == [500.0, 502.0]
    assert list(table.candidate_peaks(10, 50, 500.0)['mz']) == [500.0, 502.0]
    assert list(table.candidate_peaks(10, 50, 501.0)['mz']) == [502.0]
    assert list(table.candidate_peaks(11, 49, 0)['intensity']) == [50.0]

    # unknown scans
    assert len(table.candidate_peaks(12, 50, 0)) == 0
    assert len(table.candidate_peaks(10, 49, 0)) == 0
    assert len(table.candidate_peaks(10, 99, 0)) == 0


def test_peak_table_empty():
    table = PeakTable(make_peaks([]))
    assert len(table) == 0
    assert len(table.candidate_peaks(1, 1, 0)) == 0

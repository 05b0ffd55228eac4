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

"""Module for formatting and writing out search results."""
import pandas as pd
from xlims.const import PROTON_MASS
from xlims.utils import ppm_error

RESULT_COLUMNS = [
    'Index', 'Protein', 'Pep1', 'Pep2', 'ModType', 'TheoreticalMass', 'FeatureMass', 'PPMError',
    'FeatureMz', 'ShiftedMassPep1', 'ShiftedMzPep1', 'ShiftedMassPep2', 'ShiftedMzPep2',
    'ShiftedMassBoth', 'ShiftedMzBoth', 'ChargeState', 'LCScans', 'IMSScan', 'DriftTime',
    'Abundance', 'FeatureIndex',
]

CROSSLINK_COLUMNS = ['Index', 'Protein', 'Pep1', 'Pep2', 'ModType', 'TheoreticalMass']

# written for the second peptide of a single peptide crosslink
NO_PEPTIDE = 'null'
# written for shifted masses that don't exist for single peptides
NOT_APPLICABLE = 'N/A'


def group_results(results):
    """
    Group results of the same crosslink, feature and mass shift outcome.

    Results only differing in the LC scan are reported together.

    :param results: (list of CrossLinkResult) search results
    :return: (list of list of CrossLinkResult) groups in order of first occurrence, each
        ordered by LC scan
    """
    groups = {}
    for result in results:
        key = (result.crosslink, int(result.feature['feature_id']), result.mass_shift_result)
        groups.setdefault(key, []).append(result)
    return [sorted(group, key=lambda r: r.scan_lc) for group in groups.values()]


def shifted_mass_str(mass_shift_result, charge):
    """
    Create the shifted mass and m/z columns for a mass shift result.

    Shifted masses that were not found are reported as 0. Single peptide results fill the
    columns of the second peptide and of both peptides with N/A.

    :return: (list) six values (mass and m/z for first, second and both peptides)
    """
    values = []
    for mass, found in mass_shift_result:
        if found:
            values += [mass, mass / charge + PROTON_MASS]
        else:
            values += [0, 0]
    if len(mass_shift_result) == 1:
        values += [NOT_APPLICABLE] * 4
    return values


def results_dataframe(results):
    """
    Create a table of grouped search results.

    :param results: (list of CrossLinkResult) search results
    :return: (DataFrame) one row per result group with RESULT_COLUMNS
    """
    rows = []
    for index, group in enumerate(group_results(results)):
        first = group[0]
        crosslink = first.crosslink
        feature = first.feature
        charge = int(feature['charge'])
        feature_mass = float(feature['mass'])

        rows.append(
            [index, crosslink.protein_id, crosslink.sequence_one,
             crosslink.sequence_two or NO_PEPTIDE, crosslink.mod_type.value, crosslink.mass,
             feature_mass, ppm_error(crosslink.mass, feature_mass),
             feature_mass / charge + PROTON_MASS]
            + shifted_mass_str(first.mass_shift_result, charge)
            + [charge, ';'.join(str(r.scan_lc) for r in group), int(feature['scan_ims_rep']),
               float(feature['drift_time']), float(feature['abundance']),
               int(feature['feature_id'])])
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def crosslinks_dataframe(crosslinks):
    """Create a table of theoretical crosslinks with CROSSLINK_COLUMNS."""
    rows = [[index, xl.protein_id, xl.sequence_one, xl.sequence_two or NO_PEPTIDE,
             xl.mod_type.value, xl.mass] for index, xl in enumerate(crosslinks)]
    return pd.DataFrame(rows, columns=CROSSLINK_COLUMNS)


def write_results(results, file_name):
    """Write grouped search results to a csv file."""
    results_dataframe(results).to_csv(file_name, index=False)


def write_crosslinks(crosslinks, file_name):
    """Write theoretical crosslinks to a csv file."""
    crosslinks_dataframe(crosslinks).to_csv(file_name, index=False)

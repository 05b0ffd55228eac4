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
Readers for the LC-IMS-MS feature and isotopic peak tables.

Both are delimited text files (tab or comma separated) with a header line. Columns are found
by name, so their order does not matter and unknown columns are ignored.
"""
import numpy as np
import pandas as pd
from xlims import dtypes
from xlims.const import PROTON_MASS

# feature file column -> (feature field, integer column, required)
FEATURE_COLUMNS = {
    'Feature_Index': ('feature_id', True, False),
    'Monoisotopic_Mass': ('mass', False, True),
    'Scan_Start': ('scan_lc_start', True, False),
    'Scan_End': ('scan_lc_end', True, False),
    'Scan': ('scan_lc_rep', True, False),
    'IMS_Scan': ('scan_ims_rep', True, False),
    'Class_Rep_Charge': ('charge', True, True),
    'Drift_Time': ('drift_time', False, False),
    'Abundance': ('abundance', False, False),
}

PEAK_COLUMNS = {
    'frame_num': ('scan_lc', True, True),
    'scan_num': ('scan_ims', True, True),
    'mz': ('mz', False, True),
    'intensity': ('intensity', False, True),
}


class InputFormatError(ValueError):
    """An input table is missing a column or contains a value that can't be parsed."""

    def __init__(self, file_name, message, line=None, column=None):
        self.file_name = file_name
        self.line = line
        self.column = column
        location = file_name
        if line is not None:
            location += ", line %d" % line
        if column is not None:
            location += ", column '%s'" % column
        super().__init__("%s: %s" % (location, message))


def _detect_separator(file_name):
    with open(file_name) as f:
        header = f.readline()
    return '\t' if '\t' in header else ','


def _read_table(file_name):
    try:
        return pd.read_csv(file_name, sep=_detect_separator(file_name), dtype=str,
                           keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise InputFormatError(file_name, "file is empty") from None


def _parse_column(df, file_name, column, integer):
    """Convert a text column to numbers, reporting the first value that is not a number."""
    raw = df[column].str.strip()
    values = pd.to_numeric(raw, errors='coerce').to_numpy(dtype=np.float64, na_value=np.nan)
    bad = np.isnan(values)
    if integer:
        bad[~bad] = values[~bad] % 1 != 0
    if bad.any():
        row = int(np.argmax(bad))
        # line 1 is the header
        raise InputFormatError(file_name, "'%s' is not a valid %s" % (
            raw.iloc[row], 'integer' if integer else 'number'), line=row + 2, column=column)
    return values


def _read_columns(file_name, columns, dtype):
    df = _read_table(file_name)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c, (_, _, required) in columns.items() if required and c not in df]
    if missing:
        raise InputFormatError(file_name, "missing required column(s): %s" % ', '.join(missing))

    table = np.zeros(len(df), dtype=dtype)
    for column, (field, integer, _) in columns.items():
        if column in df:
            table[field] = _parse_column(df, file_name, column, integer)
    return table, df


def read_features(file_name):
    """
    Read an LC-IMS-MS feature table.

    Required columns are Monoisotopic_Mass and Class_Rep_Charge; the other known columns
    default to 0 (Feature_Index defaults to the row number). The monoisotopic m/z is derived
    from mass and charge.

    :param file_name: (str) path of the feature file
    :return: (ndarray, dtypes.features) features in file order
    """
    features, df = _read_columns(file_name, FEATURE_COLUMNS, dtypes.features)
    if 'Feature_Index' not in df:
        features['feature_id'] = np.arange(len(features))

    non_positive = np.flatnonzero(features['charge'] <= 0)
    if len(non_positive) > 0:
        row = int(non_positive[0])
        raise InputFormatError(file_name, "charge must be positive", line=row + 2,
                               column='Class_Rep_Charge')

    features['mz'] = features['mass'] / features['charge'] + PROTON_MASS
    return features


def read_peaks(file_name):
    """
    Read an isotopic peak table with the columns frame_num, scan_num, mz and intensity.

    :param file_name: (str) path of the peak file
    :return: (ndarray, dtypes.isotopic_peaks) peaks in file order
    """
    peaks, _ = _read_columns(file_name, PEAK_COLUMNS, dtypes.isotopic_peaks)
    return peaks

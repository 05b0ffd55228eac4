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

"""In-silico digestion of protein sequences into peptides."""
from collections import namedtuple
from pyteomics import parser
from xlims.amino_acids import peptide_mass

Peptide = namedtuple('Peptide', ['sequence', 'mass', 'protein_id'])


def _all_subsequences(sequence, min_length, max_length):
    for start in range(len(sequence)):
        for end in range(start + min_length, min(start + max_length, len(sequence)) + 1):
            yield sequence[start:end]


def digest_sequences(protein_sequence, digestion_config):
    """
    Digest a protein sequence into unique peptide sequences.

    :param protein_sequence: (str) one-letter amino acid sequence of the protein
    :param digestion_config: (DigestionConfig) enzyme, specificity and length filters
    :return: (list of str) peptide sequences ordered by their first position in the protein
        (shorter first for the same position)
    """
    min_length = digestion_config.min_peptide_length
    max_length = digestion_config.max_peptide_length

    if digestion_config.specificity == 'none':
        sequences = set(_all_subsequences(protein_sequence, min_length, max_length))
    else:
        sequences = parser.cleave(protein_sequence, digestion_config.enzyme.rule,
                                  missed_cleavages=digestion_config.missed_cleavages,
                                  min_length=min_length,
                                  semi=digestion_config.specificity == 'partial',
                                  regex=True)
        sequences = {s for s in sequences if len(s) <= max_length}

    return sorted(sequences, key=lambda s: (protein_sequence.find(s), len(s)))


def digest(protein_sequence, protein_id, digestion_config):
    """
    Digest a protein into peptides with their monoisotopic masses.

    :param protein_sequence: (str) one-letter amino acid sequence of the protein
    :param protein_id: (str) identifier carried over to every peptide
    :param digestion_config: (DigestionConfig) digestion settings
    :return: (list of Peptide)
    """
    return [Peptide(seq, peptide_mass(seq), protein_id)
            for seq in digest_sequences(protein_sequence, digestion_config)]

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

"""Reading protein sequences from FASTA files."""
import re
from pyteomics import fasta


def protein_accession(description, re_accession):
    """
    Extract the accession from a FASTA header.

    :param description: (str) header line without the leading '>'
    :param re_accession: (str) regular expression with the accession as first group
    :return: (str) the accession, or the first word of the header if the expression doesn't
        match
    """
    match = re.match(re_accession, description)
    if match:
        return match.group(1)
    words = description.split()
    return words[0] if words else description


def read_proteins(file_name, fasta_config):
    """
    Read all proteins of a FASTA file.

    :param file_name: (str) path to the FASTA file
    :param fasta_config: (FastaReaderConfig) reader config
    :return: (list of (str, str)) accession and upper case sequence of each protein
    """
    proteins = []
    with fasta.read(file_name) as reader:
        for description, sequence in reader:
            accession = protein_accession(description, fasta_config.re_accession)
            proteins.append((accession, sequence.upper()))
    return proteins

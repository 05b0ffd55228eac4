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

"""Module containing utility functions."""
import multiprocessing
from xlims.const import PPM_DIVISOR


def get_chunks(length, max_chunk_size):
    """
    Given a length and a maximum chunk size, generate a set of chunks of appropriate size.

    For each chunk, yields a tuple of:
        - The starting index of the chunk
        - The size of the chunk
        - A slice object to retrieve this chunk
    """
    chunk_start = 0
    while length > max_chunk_size:
        yield chunk_start, max_chunk_size, slice(chunk_start, chunk_start + max_chunk_size)
        chunk_start += max_chunk_size
        length -= max_chunk_size
    yield chunk_start, length, slice(chunk_start, chunk_start + length)


def resolve_threads(threads):
    """
    Translate the threads setting into a number of processes.

    0 means all cpus, a negative number N means all but -N cpus (at least one).
    """
    if threads > 0:
        return threads
    return max(1, multiprocessing.cpu_count() + threads)


def ppm_error(theoretical_mass, observed_mass):
    """Absolute deviation of observed_mass from theoretical_mass in parts per million."""
    return abs(theoretical_mass - observed_mass) / (theoretical_mass / PPM_DIVISOR)

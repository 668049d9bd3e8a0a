"""
Almanac input reader.

Input format:

    seeds: 79 14 55 13

    seed-to-soil map:
    50 98 2
    52 50 48

    soil-to-fertilizer map:
    0 15 37
    ...

Each map line is a (target_start, source_start, length) triple. Maps are
listed in the order they must be applied.
"""

from typing import List, Optional, Tuple

from software_reference.almanac import MalformedInput, Pipeline


SEEDS_PREFIX = "seeds:"
MAP_SUFFIX = "map:"

Triple = Tuple[int, int, int]


def _parse_numbers(text, line_number):
    numbers = []
    for token in text.split():
        try:
            number = int(token)
        except ValueError:
            raise MalformedInput(f"line {line_number}: {token!r} is not an integer") from None
        if number < 0:
            raise MalformedInput(f"line {line_number}: negative value {number}")
        numbers.append(number)
    return numbers


def parse_almanac(text: str) -> Tuple[List[int], List[List[Triple]], List[Optional[str]]]:
    """
    Parse almanac text.

    Args:
        text: Whole input document

    Returns:
        tuple: (seeds, tables, names) where seeds is the list of seed values,
               tables holds one list of (target, source, length) triples per
               map and names holds the map labels ("seed-to-soil", ...)

    Raises:
        MalformedInput: Missing seeds line, bad numbers, or map lines outside
                        a map block
    """
    seeds = None
    tables = []
    names = []

    # 0: expecting seeds, 1: between maps, 2: inside a map
    state = 0

    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()

        if not line:
            if state == 2:
                state = 1
            continue

        if state == 0:
            if not line.startswith(SEEDS_PREFIX):
                raise MalformedInput(f"line {line_number}: expected '{SEEDS_PREFIX}' line, got {line!r}")
            seeds = _parse_numbers(line[len(SEEDS_PREFIX):], line_number)
            state = 1

        elif line.endswith(MAP_SUFFIX):
            names.append(line[:-len(MAP_SUFFIX)].strip() or None)
            tables.append([])
            state = 2

        elif state == 2:
            numbers = _parse_numbers(line, line_number)
            if len(numbers) != 3:
                raise MalformedInput(
                    f"line {line_number}: expected 'target source length', got {line!r}"
                )
            tables[-1].append(tuple(numbers))

        else:
            raise MalformedInput(f"line {line_number}: {line!r} is outside any map block")

    if seeds is None:
        raise MalformedInput(f"missing '{SEEDS_PREFIX}' line")

    return seeds, tables, names


def read_input(filename):
    """
    Read an almanac file.

    Args:
        filename: Path to input file

    Returns:
        tuple: (seeds, tables, names), see parse_almanac
    """
    with open(filename) as f:
        return parse_almanac(f.read())


def build_pipeline(tables, names=None) -> Pipeline:
    """Pipeline with one named stage per parsed map."""
    return Pipeline.from_tables(tables, names=names)

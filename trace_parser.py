import re

ALGORITHM_TAGS = {
    'F': 'FIFO',
    'L': 'LRU',
    'O': 'OPT',
}

SEPARATORS = re.compile(r'[,\s]+')


class TraceParseError(ValueError):
    pass


class UnknownAlgorithmError(ValueError):
    pass


class EmptyTraceFileError(Exception):
    pass


class TraceRequest:
    def __init__(self, algorithm, frame_count, references):
        self.algorithm = algorithm
        self.frame_count = frame_count
        self.references = tuple(references)

    def __eq__(self, other):
        if not isinstance(other, TraceRequest):
            return NotImplemented
        return (self.algorithm, self.frame_count, self.references) == \
               (other.algorithm, other.frame_count, other.references)

    def __repr__(self):
        return (f"TraceRequest(algorithm={self.algorithm!r}, "
                f"frame_count={self.frame_count}, references={list(self.references)})")


def algorithm_for_tag(tag):
    try:
        return ALGORITHM_TAGS[tag.upper()]
    except KeyError:
        raise UnknownAlgorithmError(f"Unknown algorithm tag: {tag!r}") from None


def parse_number(token, what):
    if not token.isdigit() or not token.isascii():
        raise TraceParseError(f"Invalid {what}: {token!r}")
    return int(token)


def parse_line(line):
    """
    Parse a trace line of the form ``<algo>,<frames>,<ref>,<ref>,...``.

    References may be separated by commas, spaces or tabs. A line without a
    reference list (``F,3``) is an empty trace.
    """
    text = line.strip()
    if not text:
        raise TraceParseError("Trace line is empty")

    tag, rest = text[0], text[1:].lstrip()
    if not rest.startswith(','):
        raise TraceParseError("Expected ',' after the algorithm tag")
    algorithm = algorithm_for_tag(tag)

    frames_field, _, refs_field = rest[1:].partition(',')
    frame_count = parse_number(frames_field.strip(), 'frame count')

    references = [parse_number(token, 'page reference')
                  for token in SEPARATORS.split(refs_field) if token]

    return TraceRequest(algorithm, frame_count, references)


def read_trace_line(filename):
    # OSError from open() is left to the caller
    with open(filename, 'r') as f:
        line = f.readline()
    if line == '':
        raise EmptyTraceFileError(f"{filename} is empty")
    return line

import argparse
import sys
from typing import NamedTuple, Optional, Tuple

from memory_manager import PhysicalMemory, Statistics
from occupancy_trace import OccupancyTrace, format_table
from trace_parser import (
    ALGORITHM_TAGS,
    EmptyTraceFileError,
    UnknownAlgorithmError,
    parse_line,
    read_trace_line,
)

DEFAULT_MAX_FRAMES = 50
DEFAULT_MAX_REFERENCES = 100

ALGORITHMS = tuple(ALGORITHM_TAGS.values())

INPUT_ERRORS = (EmptyTraceFileError, OSError, ValueError)


class CapacityError(ValueError):
    pass


class Step(NamedTuple):
    """One reference of a run. snapshot holds every frame, and only on a fault."""
    time: int
    page: int
    fault: bool
    snapshot: Optional[Tuple[Optional[int], ...]] = None


class SimulationResult:
    def __init__(self, algorithm, references, stats, trace):
        self.algorithm = algorithm
        self.references = references
        self.stats = stats
        self.trace = trace

    @property
    def page_faults(self):
        return self.stats.page_faults

    def format_table(self):
        return format_table(self.references, self.trace, self.stats)


class ReplacementRun:
    """
    One pass over a reference string.

    Owns everything that changes while simulating: the frames, the fault
    counter, the LRU timestamps, the FIFO cursor and the reference string OPT
    looks ahead in. Runs never share any of it.
    """

    def __init__(self, algorithm, frame_count, references):
        self.algorithm = algorithm
        self.references = references
        self.physical_memory = PhysicalMemory(num_frames=frame_count)
        self.stats = Statistics()
        self.last_used = [None] * frame_count
        self.fifo_index = 0  # next frame to evict under FIFO
        self.current_time = 0

    def steps(self):
        for time, page in enumerate(self.references):
            self.current_time = time
            fault = self.handle_memory_reference(page)
            snapshot = self.physical_memory.snapshot() if fault else None
            yield Step(time, page, fault, snapshot)

    def handle_memory_reference(self, page_num):
        frame_num = self.physical_memory.find_page(page_num)

        if frame_num is not None:
            # Page hit - only LRU cares, but the timestamp is kept for all
            self.last_used[frame_num] = self.current_time
            return False

        self.handle_page_fault(page_num)
        return True

    def handle_page_fault(self, page_num):
        self.stats.record_page_fault()

        # With no frames at all nothing can ever become resident
        if self.physical_memory.num_frames == 0:
            return

        frame_num = self.physical_memory.find_free_frame()
        if frame_num is None:
            frame_num = self.select_victim_page()

        self.physical_memory.allocate_frame(frame_num, page_num)
        self.last_used[frame_num] = self.current_time

    def select_victim_page(self):
        if self.algorithm == 'FIFO':
            return self.select_victim_fifo()
        elif self.algorithm == 'LRU':
            return self.select_victim_lru()
        elif self.algorithm == 'OPT':
            return self.select_victim_optimal()
        else:
            raise UnknownAlgorithmError(f"Unknown algorithm: {self.algorithm}")

    def select_victim_fifo(self):
        victim_frame = self.fifo_index
        self.fifo_index = (self.fifo_index + 1) % self.physical_memory.num_frames
        return victim_frame

    def select_victim_lru(self):
        victim_frame = 0
        lru_time = self.last_used[0]

        # Strict < keeps the lowest frame number on ties
        for frame_num in range(1, self.physical_memory.num_frames):
            if self.last_used[frame_num] < lru_time:
                lru_time = self.last_used[frame_num]
                victim_frame = frame_num

        return victim_frame

    def next_use(self, page_num):
        for idx in range(self.current_time + 1, len(self.references)):
            if self.references[idx] == page_num:
                return idx
        return None

    def select_victim_optimal(self):
        """
        Replace the page that will be used furthest in the future, or the
        first one found that is never used again.
        """
        victim_frame = 0
        max_future_time = -1

        for frame_num in range(self.physical_memory.num_frames):
            next_ref_time = self.next_use(self.physical_memory.get_frame_info(frame_num))

            if next_ref_time is None:
                return frame_num

            if next_ref_time > max_future_time:
                max_future_time = next_ref_time
                victim_frame = frame_num

        return victim_frame


class PageReplacementSimulator:

    def __init__(self, algorithm='FIFO', frame_count=3,
                 max_frames=DEFAULT_MAX_FRAMES, max_references=DEFAULT_MAX_REFERENCES):
        if algorithm not in ALGORITHMS:
            raise UnknownAlgorithmError(f"Unknown algorithm: {algorithm}")
        if frame_count < 0:
            raise CapacityError(f"Frame count must not be negative, got {frame_count}")
        if max_frames is not None and frame_count > max_frames:
            raise CapacityError(f"Frame count {frame_count} exceeds the limit of {max_frames}")

        self.algorithm = algorithm
        self.frame_count = frame_count
        self.max_references = max_references

    def new_run(self, references):
        references = tuple(references)
        if self.max_references is not None and len(references) > self.max_references:
            raise CapacityError(
                f"Reference string has {len(references)} entries, "
                f"exceeds the limit of {self.max_references}")
        return ReplacementRun(self.algorithm, self.frame_count, references)

    def steps(self, references):
        """
        Lazily simulate the reference string, yielding a Step per reference.

        Every call starts cold with frames of its own, so several generators
        from one simulator can be advanced independently.
        """
        return self.new_run(references).steps()

    def run(self, references):
        replacement_run = self.new_run(references)
        trace = OccupancyTrace(self.frame_count)
        for step in replacement_run.steps():
            trace.record(step)
        return SimulationResult(self.algorithm, replacement_run.references,
                                replacement_run.stats, trace)


def load_request(filename):
    return parse_line(read_trace_line(filename))


def error_message(error):
    if isinstance(error, EmptyTraceFileError):
        return "Input file is empty."
    if isinstance(error, OSError):
        return "Cannot open input file."
    return f"Error: {error}"


def run_simulation(filename, max_frames=DEFAULT_MAX_FRAMES, max_references=DEFAULT_MAX_REFERENCES):
    request = load_request(filename)
    simulator = PageReplacementSimulator(
        algorithm=request.algorithm,
        frame_count=request.frame_count,
        max_frames=max_frames,
        max_references=max_references,
    )
    result = simulator.run(request.references)

    print(f"Running {result.algorithm}")
    print(result.format_table(), end='')

    return result


class ArgumentParser(argparse.ArgumentParser):

    def error(self, message):
        # Usage errors exit with 1 like every other fatal error here
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_arg_parser():
    parser = ArgumentParser(
        prog="pagesim",
        description="Simulate FIFO, LRU or OPT page replacement over a reference string.",
    )
    parser.add_argument(
        "input_file",
        help="file whose first line is <F|L|O>,<frames>,<ref>,<ref>,..."
    )
    parser.add_argument(
        "--max-frames", type=int, default=DEFAULT_MAX_FRAMES,
        help=f"largest accepted frame count (default: {DEFAULT_MAX_FRAMES})"
    )
    parser.add_argument(
        "--max-references", type=int, default=DEFAULT_MAX_REFERENCES,
        help=f"longest accepted reference string (default: {DEFAULT_MAX_REFERENCES})"
    )
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    try:
        run_simulation(args.input_file, max_frames=args.max_frames,
                       max_references=args.max_references)
    except INPUT_ERRORS as e:
        print(error_message(e), file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

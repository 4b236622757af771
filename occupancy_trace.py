class OccupancyTrace:
    """
    Frame contents at every timestep of a run.

    Each column is either None (no fault at that timestep) or a complete
    snapshot of all frames taken right after the faulting page was loaded.
    """

    def __init__(self, num_frames):
        self.num_frames = num_frames
        self.columns = []

    def record(self, step):
        if step.snapshot is not None and len(step.snapshot) != self.num_frames:
            raise ValueError(
                f"Snapshot has {len(step.snapshot)} frames, expected {self.num_frames}")
        self.columns.append(step.snapshot)

    def cell(self, frame_num, time):
        column = self.columns[time]
        if column is None:
            return None
        return column[frame_num]

    def row(self, frame_num):
        return [self.cell(frame_num, t) for t in range(len(self.columns))]

    def __len__(self):
        return len(self.columns)

    def __eq__(self, other):
        if not isinstance(other, OccupancyTrace):
            return NotImplemented
        return self.num_frames == other.num_frames and self.columns == other.columns


def format_table(references, trace, stats):
    lines = [''.join(f"{page} " for page in references), '-' * (len(references) * 2)]
    for frame_num in range(trace.num_frames):
        cells = ["  " if page is None else f"{page} " for page in trace.row(frame_num)]
        lines.append(''.join(cells))
    lines.append(str(stats))
    return '\n'.join(lines) + '\n'

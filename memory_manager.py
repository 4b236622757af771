class PhysicalMemory:
    def __init__(self, num_frames=3):
        self.num_frames = num_frames
        # Each frame stores a resident page number or None if free
        self.frames = [None] * num_frames

    def find_page(self, page_num):
        for i, frame in enumerate(self.frames):
            if frame == page_num:
                return i
        return None

    def find_free_frame(self):
        for i, frame in enumerate(self.frames):
            if frame is None:
                return i
        return None

    def allocate_frame(self, frame_num, page_num):
        self.frames[frame_num] = page_num

    def get_frame_info(self, frame_num):
        return self.frames[frame_num]

    def snapshot(self):
        return tuple(self.frames)


class Statistics:
    def __init__(self):
        self.page_faults = 0

    def record_page_fault(self):
        self.page_faults += 1

    def __str__(self):
        return f"Total page faults = {self.page_faults}"

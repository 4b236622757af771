import argparse
import sys

import matplotlib.pyplot as plt

from simulator import ALGORITHMS, INPUT_ERRORS, PageReplacementSimulator, error_message, load_request


def collect_fault_counts(references, frame_counts, algorithms=ALGORITHMS):
    """Return {algorithm: [page faults for each entry of frame_counts]}."""
    results = {}
    for algorithm in algorithms:
        results[algorithm] = []
        for frame_count in frame_counts:
            simulator = PageReplacementSimulator(algorithm=algorithm, frame_count=frame_count,
                                                 max_frames=None, max_references=None)
            results[algorithm].append(simulator.run(references).page_faults)
    return results


def plot_fault_counts(frame_counts, results, output, title='Page Replacement Algorithm Comparison'):
    fig, ax = plt.subplots(figsize=(8, 5))
    fig.suptitle(title, fontsize=14, fontweight='bold')

    for algorithm, faults in results.items():
        ax.plot(frame_counts, faults, marker='o', label=algorithm)
        for x, y in zip(frame_counts, faults):
            ax.annotate(f'{y}', (x, y), textcoords='offset points', xytext=(0, 5),
                        ha='center', fontsize=8)

    ax.set_xlabel('Frames')
    ax.set_ylabel('Page Faults')
    ax.set_xticks(list(frame_counts))
    ax.grid(axis='y', alpha=0.3)
    ax.legend(loc='upper right', frameon=True)

    plt.tight_layout()
    fig.savefig(output, dpi=300, bbox_inches='tight')
    plt.close(fig)
    return output


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Plot page faults against frame count for FIFO, LRU and OPT."
    )
    parser.add_argument("input_file",
                        help="trace file in the simulator format; its algorithm tag and frame count are ignored")
    parser.add_argument("-o", "--output", default="algorithm_comparison.png")
    parser.add_argument("--max-frames", type=int, default=None,
                        help="largest frame count to plot (default: distinct pages + 1)")
    args = parser.parse_args(argv)

    try:
        references = load_request(args.input_file).references
    except INPUT_ERRORS as e:
        print(error_message(e), file=sys.stderr)
        return 1

    max_frames = args.max_frames
    if max_frames is None:
        max_frames = len(set(references)) + 1
    frame_counts = range(1, max_frames + 1)

    print("Running simulations...")
    results = collect_fault_counts(references, frame_counts)

    print(f"{'Frames':<8}" + ''.join(f"{algorithm:<8}" for algorithm in results))
    for i, frame_count in enumerate(frame_counts):
        print(f"{frame_count:<8}" + ''.join(f"{faults[i]:<8}" for faults in results.values()))

    plot_fault_counts(frame_counts, results, args.output)
    print(f"\nGraph saved as '{args.output}'")
    return 0


if __name__ == '__main__':
    sys.exit(main())

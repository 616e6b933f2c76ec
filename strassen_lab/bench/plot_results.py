"""
Utility script to plot GEMM benchmark results from CSV.
Usage: python -m strassen_lab.bench.plot_results
"""

import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from pathlib import Path

results_dir = Path.cwd() / "results"
plots_dir = results_dir / "plots"

KERNEL_STYLES = {
    'numpy': ('NumPy', 's'),
    'naive': ('Naive (Numba)', 'o'),
    'strassen': ('Strassen', '^'),
}


def plot_matmul_results(csv_path=None, output_path=None):
    """
    Plot latency and throughput per kernel against problem size.

    Returns:
        Path of the written PNG, or None when the CSV is missing
    """
    csv_path = Path(csv_path) if csv_path else results_dir / "matmul_results.csv"
    output_path = Path(output_path) if output_path else plots_dir / "matmul_results.png"
    if not csv_path.exists():
        print(f"Results file not found: {csv_path}")
        return None

    df = pd.read_csv(csv_path)
    # Problem size as the cube root of M*K*N keeps the x axis readable
    df['size'] = (df['M'] * df['K'] * df['N']) ** (1.0 / 3.0)

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    for kernel, (label, marker) in KERNEL_STYLES.items():
        data = df[df['kernel'] == kernel].sort_values('size')
        if data.empty:
            continue
        axes[0].semilogy(data['size'], data['latency_ms'], '-', label=label, marker=marker)
        axes[1].plot(data['size'], data['throughput_gflops'], '-', label=label, marker=marker)

    axes[0].set_xlabel('Problem size (MKN)^(1/3)')
    axes[0].set_ylabel('Latency (ms)')
    axes[0].set_title('GEMM Latency Comparison')
    axes[1].set_xlabel('Problem size (MKN)^(1/3)')
    axes[1].set_ylabel('Throughput (GFLOPS)')
    axes[1].set_title('GEMM Throughput Comparison')
    for ax in axes:
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=150)
    print(f"Saved plot: {output_path}")
    plt.close(fig)
    return output_path


if __name__ == "__main__":
    print("Generating plots from benchmark results...")
    plot_matmul_results()
    print("\nDone!")

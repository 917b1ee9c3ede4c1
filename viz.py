from __future__ import annotations

from argparse import ArgumentParser
import os

import matplotlib.pyplot as plt

import numpy as np

import pandas as pd


plt.rcParams["font.size"] = 18

opt_dict = {
    "tpe": "TPE",
    "tpe-startup": "TPE (10 random start-up trials)",
    "random": "Random",
    "optuna-tpe": "Optuna TPESampler",
}
color_dict = {
    "tpe": "red",
    "tpe-startup": "blue",
    "random": "black",
    "optuna-tpe": "olive",
}
linestyle_dict = {
    "tpe": "solid",
    "tpe-startup": "dashed",
    "random": "dotted",
    "optuna-tpe": "dashdot",
}


def plot_trajectory(ax: plt.Axes, values: np.ndarray, color: str, linestyle: str) -> plt.Line2D:
    cum_min_values = np.minimum.accumulate(values, axis=-1)
    dx = np.arange(cum_min_values.shape[-1]) + 1
    m = np.mean(cum_min_values, axis=0)
    s = np.std(cum_min_values, axis=0) / np.sqrt(cum_min_values.shape[0])
    (line,) = ax.plot(
        dx, m, color=color, linestyle=linestyle, marker="o", markevery=10, markeredgecolor="black"
    )
    ax.fill_between(dx, m - s, m + s, alpha=0.2, color=color)
    return line


def plot_ax(ax: plt.Axes, df: pd.DataFrame, func_name: str) -> tuple[list[plt.Line2D], list[str]]:
    df_filtered = df[df.func_name == func_name]
    ax.set_title(func_name)
    lines, labels = [], []
    n_trials = 0
    for opt_key, opt_label in opt_dict.items():
        rows = df_filtered[df_filtered.opt_name == opt_key]
        if len(rows) == 0:
            continue
        values = np.array(rows["values"].to_list())
        n_trials = max(n_trials, values.shape[-1])
        line = plot_trajectory(
            ax, values, color=color_dict[opt_key], linestyle=linestyle_dict[opt_key]
        )
        lines.append(line)
        labels.append(opt_label)

    ax.set_yscale("log")
    ax.grid()
    ax.set_xlim(1, max(n_trials, 2))
    return lines, labels


def plot_figure(results_path: str, output_path: str) -> None:
    df = pd.read_json(results_path)
    func_names = sorted(df.func_name.unique())
    fig, axes = plt.subplots(
        ncols=len(func_names),
        sharex=True,
        figsize=(8 * len(func_names), 6),
        squeeze=False,
    )
    fig.supxlabel("# of Evaluations")
    fig.supylabel("Best Objective Value")

    lines, labels = [], []
    for ax, func_name in zip(axes[0], func_names):
        lines, labels = plot_ax(ax, df, func_name)

    fig.legend(
        handles=lines,
        loc="upper center",
        labels=labels,
        bbox_to_anchor=(0.5, 0.0),
        fancybox=False,
        ncol=len(labels),
    )
    plt.savefig(output_path, bbox_inches="tight")


if __name__ == "__main__":
    parser = ArgumentParser()
    parser.add_argument("--results", default="results.json")
    parser.add_argument("--output", default="figs/perf-over-time.pdf")
    args = parser.parse_args()
    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    plot_figure(args.results, args.output)

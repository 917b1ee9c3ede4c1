from __future__ import annotations

from argparse import ArgumentParser
from collections.abc import Callable
from typing import Any

import numpy as np

import pandas as pd

import tpe
from tpe.distributions import BaseDistribution
from tpe.distributions import CategoricalDistribution
from tpe.distributions import FloatDistribution
from tpe.distributions import IntDistribution

from tqdm import tqdm


class Benchmark:
    def __init__(
        self,
        search_space: dict[str, BaseDistribution],
        func: Callable[[dict[str, Any]], float],
    ):
        self.search_space = search_space
        self._func = func

    def __call__(self, params: dict[str, Any]) -> float:
        return self._func(params)


def _sphere(dim: int) -> Benchmark:
    return Benchmark(
        search_space={f"x{d}": FloatDistribution(-5.0, 5.0) for d in range(dim)},
        func=lambda params: float(sum(v**2 for v in params.values())),
    )


def _quadratic_with_choice() -> Benchmark:
    choices = [1, 10, 100]
    return Benchmark(
        search_space={"x": FloatDistribution(-5.0, 5.0), "y": CategoricalDistribution(choices)},
        func=lambda params: params["x"] ** 2 + params["y"],
    )


def _log_scale_quadratic() -> Benchmark:
    # The optimum lr=1e-3 and n_units=64 are only easy to find in the log domain.
    return Benchmark(
        search_space={
            "lr": FloatDistribution(1e-5, 1.0, log=True),
            "n_units": IntDistribution(1, 1024, log=True),
        },
        func=lambda params: (
            (np.log10(params["lr"]) + 3.0) ** 2 + (np.log2(params["n_units"]) - 6.0) ** 2
        ),
    )


BENCHMARKS: dict[str, Callable[[], Benchmark]] = {
    "sphere-1": lambda: _sphere(1),
    "sphere-4": lambda: _sphere(4),
    "quadratic-choice": _quadratic_with_choice,
    "log-quadratic": _log_scale_quadratic,
}
OPTS = ["tpe", "tpe-startup", "random", "optuna-tpe"]


def _run_optuna(bench: Benchmark, seed: int, n_trials: int) -> list[float]:
    import optuna

    optuna.logging.set_verbosity(optuna.logging.WARNING)
    optuna_space = {}
    for name, dist in bench.search_space.items():
        if isinstance(dist, CategoricalDistribution):
            optuna_space[name] = optuna.distributions.CategoricalDistribution(dist.choices)
        elif isinstance(dist, IntDistribution):
            optuna_space[name] = optuna.distributions.IntDistribution(
                dist.low, dist.high, log=dist.log
            )
        else:
            # optuna includes the upper bound, ours does not.
            optuna_space[name] = optuna.distributions.FloatDistribution(
                dist.low, float(np.nextafter(dist.high, dist.low)), log=dist.log
            )

    study = optuna.create_study(sampler=optuna.samplers.TPESampler(seed=seed))
    for _ in range(n_trials):
        trial = study.ask(optuna_space)
        study.tell(trial, bench(trial.params))
    return [float(t.value) for t in study.trials]


def run_experiment(bench: Benchmark, opt_name: str, seed: int, n_trials: int) -> list[float]:
    if opt_name == "optuna-tpe":
        return _run_optuna(bench, seed, n_trials)

    if opt_name == "tpe":
        solver = tpe.TPESolver(bench.search_space, seed=seed)
    elif opt_name == "tpe-startup":
        solver = tpe.TPESolver(bench.search_space, seed=seed, n_startup_trials=10)
    elif opt_name == "random":
        solver = tpe.TPESolver(bench.search_space, seed=seed, n_startup_trials=n_trials)
    else:
        raise ValueError(f"Got an unknown opt: {opt_name}.")

    values = []
    for _ in range(n_trials):
        trial = solver.ask()
        value = bench(trial.params)
        solver.tell(trial.trial_id, value)
        values.append(value)
    return values


def main(bench_names: list[str], opt_names: list[str], n_seeds: int, n_trials: int) -> None:
    data = []
    for opt_name in opt_names:
        for bench_name in bench_names:
            bench = BENCHMARKS[bench_name]()
            for seed in tqdm(range(n_seeds), desc=f"{opt_name} on {bench_name}"):
                values = run_experiment(bench, opt_name=opt_name, seed=seed, n_trials=n_trials)
                data.append(
                    {"opt_name": opt_name, "func_name": bench_name, "seed": seed, "values": values}
                )
                pd.DataFrame(data).to_json("results.json")


if __name__ == "__main__":
    parser = ArgumentParser()
    parser.add_argument("--bench", nargs="+", choices=list(BENCHMARKS), default=list(BENCHMARKS))
    parser.add_argument("--opt", nargs="+", choices=OPTS, default=OPTS)
    parser.add_argument("--n_seeds", type=int, default=10)
    parser.add_argument("--n_trials", type=int, default=100)
    args = parser.parse_args()
    main(args.bench, args.opt, n_seeds=args.n_seeds, n_trials=args.n_trials)

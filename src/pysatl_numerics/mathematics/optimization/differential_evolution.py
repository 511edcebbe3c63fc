"""
Global minimization by differential evolution (DE/rand/1/bin with dither).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.mathematics.optimization.optimizer import (
    OptimizationStatus,
    Optimizer,
    ParameterSet,
    check_bounds,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pysatl_numerics.types import ObjectiveFunc


class DifferentialEvolution(Optimizer):
    """
    Differential evolution over a box.

    Parameters
    ----------
    objective : Callable[[ndarray], float]
        Function to optimize.
    number_of_parameters : int
        Dimension of the search space.
    lower_bounds, upper_bounds : Sequence[float]
        Box constraints; ``lower < upper`` is required in every coordinate.

    Attributes
    ----------
    population_size : int
        Number of members, default 30.
    seed : int
        Seed of the ``numpy.random.default_rng`` generator, default 12345.
    mutation : float
        Scale factor used when no dither is drawn, in ``[0, 2]``, default 0.75.
    dither_rate : float
        Probability of drawing the scale factor from ``U(0.5, 1)``, default 0.9.
    crossover_probability : float
        Binomial crossover probability, default 0.9.
    """

    def __init__(
        self,
        objective: ObjectiveFunc,
        number_of_parameters: int,
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
    ) -> None:
        super().__init__(objective, number_of_parameters)
        lower, upper, _ = check_bounds(number_of_parameters, lower_bounds, upper_bounds, strict=True)
        self.lower_bounds = lower
        self.upper_bounds = upper
        self.population_size: int = 30
        self.seed: int = 12345
        self.mutation: float = 0.75
        self.dither_rate: float = 0.9
        self.crossover_probability: float = 0.9

    def validate_settings(self) -> None:
        super().validate_settings()
        if self.population_size < 4:
            raise ValueError("The population size must be at least 4.")
        if not 0.0 <= self.mutation <= 2.0:
            raise ValueError("The mutation parameter must be between 0 and 2.")
        if not 0.0 <= self.dither_rate <= 1.0:
            raise ValueError("The dithering rate must be between 0 and 1.")
        if not 0.0 <= self.crossover_probability <= 1.0:
            raise ValueError("The crossover probability must be between 0 and 1.")

    def _optimize(self) -> None:
        n = self.number_of_parameters
        size = self.population_size
        rng = np.random.default_rng(self.seed)
        width = self.upper_bounds - self.lower_bounds

        population: list[ParameterSet] = []
        for _ in range(size):
            values = self.lower_bounds + rng.random(n) * width
            population.append(ParameterSet(values, self.evaluate(values)))
        self.iterations += 1

        while self.iterations < self.max_iterations:
            for i in range(size):
                r0, r1, r2 = rng.choice(np.delete(np.arange(size), i), size=3, replace=False)
                scale = 0.5 + 0.5 * rng.random() if rng.random() <= self.dither_rate else self.mutation
                j_rand = rng.integers(n)
                cross = rng.random(n) <= self.crossover_probability
                cross[j_rand] = True

                mutant = population[r0].values + scale * (population[r1].values - population[r2].values)
                trial = np.where(cross, mutant, population[i].values)
                trial = np.clip(trial, self.lower_bounds, self.upper_bounds)

                fitness = self.evaluate(trial)
                if fitness <= population[i].fitness or not np.isfinite(population[i].fitness):
                    population[i] = ParameterSet(trial, fitness)

            fitnesses = np.array([member.fitness for member in population])
            if self.iterations >= 10 and np.all(np.isfinite(fitnesses)):
                spread = float(np.std(fitnesses, ddof=1))
                if spread < self.absolute_tolerance + self.relative_tolerance * abs(
                    float(np.mean(fitnesses))
                ):
                    self.update_status(OptimizationStatus.SUCCESS)
                    return
            self.iterations += 1

        self.update_status(OptimizationStatus.MAXIMUM_ITERATIONS_REACHED)


__all__ = ["DifferentialEvolution"]

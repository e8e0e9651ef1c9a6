"""Decision policies that map a perception vector to an animal action.

The default :class:`LinearBrain` is a single linear layer (weights plus one
bias per output) whose positive outputs are treated as a probability
distribution. Weights are stored flattened so a child can inherit them with a
few slots replaced by fresh random values.
"""

from __future__ import annotations

import random
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

from .types import PERCEPTION_KEYS, AnimalAction, Perception

OUTPUT_ACTIONS: Sequence[AnimalAction] = (
    AnimalAction.TURN_LEFT,
    AnimalAction.TURN_RIGHT,
    AnimalAction.MOVE,
    AnimalAction.EAT,
)

WEIGHT_RANGE = (-1.0, 1.0)

PerceptionLike = Union[Perception, Sequence[int]]


@runtime_checkable
class DecisionPolicy(Protocol):
    """Contract every pluggable animal policy satisfies."""

    def decide(self, perception: PerceptionLike) -> AnimalAction:
        """Return the action to take for the given perception."""

    def clone_with_mutation(self) -> "DecisionPolicy":
        """Return an independent copy with at least one weight re-drawn."""


def expected_weight_count() -> int:
    """Return the flattened parameter count: one row of inputs plus bias per output."""

    return (len(PERCEPTION_KEYS) + 1) * len(OUTPUT_ACTIONS)


def generate_weight(rng: random.Random | None = None) -> float:
    rng = rng or random
    return rng.uniform(*WEIGHT_RANGE)


def initialize_brain_weights(rng: random.Random | None = None) -> List[float]:
    return [generate_weight(rng) for _ in range(expected_weight_count())]


def mutate_brain_weights(
    weights: Sequence[float],
    *,
    rng: random.Random | None = None,
    count: int = 1,
) -> List[float]:
    """Return a copy of ``weights`` with ``count`` distinct slots re-drawn."""

    rng = rng or random
    if count < 1:
        raise ValueError("At least one weight must be mutated")
    mutated = list(weights)
    for index in rng.sample(range(len(mutated)), min(count, len(mutated))):
        mutated[index] = generate_weight(rng)
    return mutated


def _as_inputs(perception: PerceptionLike) -> List[float]:
    if not isinstance(perception, Perception):
        perception = Perception.from_vector(tuple(perception))
    return [float(value) for value in perception.as_vector()]


class LinearBrain:
    """Linear policy with a weighted random draw over positive outputs."""

    def __init__(
        self,
        weights: Optional[Sequence[float]] = None,
        *,
        rng: random.Random | None = None,
        mutation_count: int = 1,
    ) -> None:
        self._rng = rng or random.Random()
        if weights is None:
            weights = initialize_brain_weights(self._rng)
        expected = expected_weight_count()
        if len(weights) != expected:
            raise ValueError(f"Expected {expected} weights, got {len(weights)}")
        self.weights = [float(value) for value in weights]
        self.mutation_count = mutation_count

    def outputs(self, perception: PerceptionLike) -> List[float]:
        inputs = _as_inputs(perception)
        stride = len(inputs) + 1
        scores: List[float] = []
        for row in range(0, len(self.weights), stride):
            acc = self.weights[row + len(inputs)]
            for i, value in enumerate(inputs):
                acc += value * self.weights[row + i]
            scores.append(acc)
        return scores

    def decide(self, perception: PerceptionLike) -> AnimalAction:
        return self._choose_action(self.outputs(perception))

    def _choose_action(self, scores: Sequence[float]) -> AnimalAction:
        active = [(index, score) for index, score in enumerate(scores) if score > 0.0]
        if not active:
            return AnimalAction.NONE

        total = sum(score for _, score in active)
        draw = self._rng.uniform(0.0, total)
        running = 0.0
        for index, score in active:
            running += score
            if draw < running:
                return OUTPUT_ACTIONS[index]
        # A draw landing exactly on the upper bound belongs to the last bucket.
        return OUTPUT_ACTIONS[active[-1][0]]

    def clone_with_mutation(self) -> "LinearBrain":
        weights = mutate_brain_weights(self.weights, rng=self._rng, count=self.mutation_count)
        return type(self)(weights, rng=self._rng, mutation_count=self.mutation_count)


class WinnerTakeAllBrain(LinearBrain):
    """Alternative policy: the largest positive output always wins."""

    def _choose_action(self, scores: Sequence[float]) -> AnimalAction:
        best_index = None
        best_score = 0.0
        for index, score in enumerate(scores):
            if score > best_score:
                best_index = index
                best_score = score
        if best_index is None:
            return AnimalAction.NONE
        return OUTPUT_ACTIONS[best_index]


_POLICIES = {
    "weighted": LinearBrain,
    "winner": WinnerTakeAllBrain,
}


def build_policy(name: str = "weighted", *, rng: random.Random | None = None, mutation_count: int = 1) -> LinearBrain:
    try:
        policy_cls = _POLICIES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown decision policy: {name}") from None
    return policy_cls(rng=rng, mutation_count=mutation_count)

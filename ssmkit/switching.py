"""Per-state emission banks for switching (hidden Markov) models.

A switching model holds one emission per latent state together with the
state transition matrix and initial state distribution. The helpers here build
such banks and provide the three quantities a forward-backward / Baum-Welch
loop needs from its emissions: the (T, K) log-likelihood matrix, the weighted
M-step fit, and trajectory simulation under a given state path.

Example:
    >>> import numpy as np
    >>> from ssmkit.switching import gaussian_switching_model, loglikelihood_matrix
    >>> model = gaussian_switching_model(n_states=2, output_dim=1)
    >>> loglikelihood_matrix(model.emissions, np.zeros((5, 1))).shape
    (5, 2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import FitConfig
from .emissions import EmissionModel, build_emission
from .errors import InvalidDataError, InvalidParameterError
from .logging import get_logger
from .models import AutoRegression, BernoulliRegression, Gaussian, GaussianRegression

logger = get_logger(__name__)


def initialize_transition_matrix(n_states: int) -> np.ndarray:
    """Uniform row-stochastic transition matrix, shape (n_states, n_states)."""
    if n_states < 1:
        raise InvalidParameterError(f"n_states must be >= 1, got {n_states}")
    return np.ones((n_states, n_states)) / n_states


def initialize_state_distribution(n_states: int) -> np.ndarray:
    """Uniform initial state distribution, shape (n_states,)."""
    if n_states < 1:
        raise InvalidParameterError(f"n_states must be >= 1, got {n_states}")
    return np.ones(n_states) / n_states


def spawn_generators(
    n: int, rng: Optional[np.random.Generator] = None
) -> List[np.random.Generator]:
    """Independent child generators, one per state.

    Children are spawned from one seed sequence. When `rng` is given the
    sequence is seeded from it, so a seeded parent gives reproducible children.

    Example:
        >>> a, b = spawn_generators(2, np.random.default_rng(0))
        >>> bool(a.normal() == b.normal())
        False
    """
    entropy = None if rng is None else int(rng.integers(2**63))
    return [np.random.default_rng(child) for child in np.random.SeedSequence(entropy).spawn(n)]


@dataclass
class SwitchingModel:
    """
    Emissions and state dynamics of a switching model.

    Args:
        emissions: One emission model per latent state.
        trans_mat: Transition matrix, shape (K, K), rows sum to one. Defaults
            to uniform.
        start_prob: Initial state distribution, shape (K,). Defaults to uniform.
        state_names: Optional state names.
    """

    emissions: List[EmissionModel]
    trans_mat: Optional[np.ndarray] = None
    start_prob: Optional[np.ndarray] = None
    state_names: Optional[List[str]] = None

    def __post_init__(self) -> None:
        """Validate SwitchingModel invariants."""
        k = len(self.emissions)
        if k < 1:
            raise InvalidParameterError("SwitchingModel needs at least one emission")

        self.emissions = [build_emission(emission) for emission in self.emissions]

        if self.trans_mat is None:
            self.trans_mat = initialize_transition_matrix(k)
        self.trans_mat = np.asarray(self.trans_mat, dtype=float)
        if self.trans_mat.shape != (k, k):
            raise InvalidParameterError(f"trans_mat shape {self.trans_mat.shape} != ({k}, {k})")
        if np.any(self.trans_mat < 0) or not np.allclose(self.trans_mat.sum(axis=1), 1.0):
            raise InvalidParameterError("trans_mat rows must be non-negative and sum to 1")

        if self.start_prob is None:
            self.start_prob = initialize_state_distribution(k)
        self.start_prob = np.asarray(self.start_prob, dtype=float)
        if self.start_prob.shape != (k,):
            raise InvalidParameterError(f"start_prob shape {self.start_prob.shape} != ({k},)")
        if np.any(self.start_prob < 0) or not np.isclose(self.start_prob.sum(), 1.0):
            raise InvalidParameterError("start_prob must be non-negative and sum to 1")

        if self.state_names is not None and len(self.state_names) != k:
            raise InvalidParameterError(f"state_names has {len(self.state_names)} entries, expected {k}")

    @property
    def n_states(self) -> int:
        return len(self.emissions)


def gaussian_switching_model(
    n_states: int,
    output_dim: int,
    trans_mat: Optional[np.ndarray] = None,
    start_prob: Optional[np.ndarray] = None,
    config: Optional[FitConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SwitchingModel:
    """Switching model with a Gaussian emission per state.

    Each state samples from its own child generator of `rng` (see
    :func:`spawn_generators`).
    """
    emissions = [
        Gaussian(output_dim=output_dim, config=config, rng=state_rng)
        for state_rng in spawn_generators(n_states, rng)
    ]
    return SwitchingModel(emissions, trans_mat=trans_mat, start_prob=start_prob)


def switching_gaussian_regression(
    n_states: int,
    input_dim: int,
    output_dim: int,
    include_intercept: bool = True,
    beta: Optional[np.ndarray] = None,
    cov: Optional[np.ndarray] = None,
    ridge: float = 0.0,
    trans_mat: Optional[np.ndarray] = None,
    start_prob: Optional[np.ndarray] = None,
    config: Optional[FitConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SwitchingModel:
    """Switching model with a Gaussian regression emission per state.

    Each state gets its own copy of `beta` and `cov`.
    """
    emissions = [
        GaussianRegression(
            input_dim=input_dim,
            output_dim=output_dim,
            include_intercept=include_intercept,
            beta=None if beta is None else np.array(beta, dtype=float),
            cov=None if cov is None else np.array(cov, dtype=float),
            ridge=ridge,
            config=config,
            rng=state_rng,
        )
        for state_rng in spawn_generators(n_states, rng)
    ]
    return SwitchingModel(emissions, trans_mat=trans_mat, start_prob=start_prob)


def switching_bernoulli_regression(
    n_states: int,
    input_dim: int,
    include_intercept: bool = True,
    beta: Optional[np.ndarray] = None,
    ridge: float = 0.0,
    trans_mat: Optional[np.ndarray] = None,
    start_prob: Optional[np.ndarray] = None,
    config: Optional[FitConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SwitchingModel:
    """Switching model with a Bernoulli regression emission per state."""
    emissions = [
        BernoulliRegression(
            input_dim=input_dim,
            include_intercept=include_intercept,
            beta=None if beta is None else np.array(beta, dtype=float),
            ridge=ridge,
            config=config,
            rng=state_rng,
        )
        for state_rng in spawn_generators(n_states, rng)
    ]
    return SwitchingModel(emissions, trans_mat=trans_mat, start_prob=start_prob)


def switching_autoregression(
    n_states: int,
    output_dim: int,
    order: int,
    include_intercept: bool = True,
    beta: Optional[np.ndarray] = None,
    cov: Optional[np.ndarray] = None,
    ridge: float = 0.0,
    trans_mat: Optional[np.ndarray] = None,
    start_prob: Optional[np.ndarray] = None,
    config: Optional[FitConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SwitchingModel:
    """Switching model with an autoregressive emission per state."""
    emissions = [
        AutoRegression(
            output_dim=output_dim,
            order=order,
            include_intercept=include_intercept,
            beta=None if beta is None else np.array(beta, dtype=float),
            cov=None if cov is None else np.array(cov, dtype=float),
            ridge=ridge,
            config=config,
            rng=state_rng,
        )
        for state_rng in spawn_generators(n_states, rng)
    ]
    return SwitchingModel(emissions, trans_mat=trans_mat, start_prob=start_prob)


def loglikelihood_matrix(emissions: Sequence[EmissionModel], *data) -> np.ndarray:
    """Observation log-likelihood under every state.

    Args:
        emissions: One emission per state.
        *data: Log-likelihood arguments shared by all emissions.

    Returns:
        Matrix of shape (T, K) with entry [t, k] = log p(obs_t | state k).
    """
    columns = [np.asarray(emission.loglikelihood(*data)) for emission in emissions]
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise InvalidDataError(f"emissions returned different observation counts: {sorted(lengths)}")
    return np.column_stack(columns)


def weighted_fit(
    emissions: Sequence[EmissionModel], responsibilities: np.ndarray, *data
) -> List[EmissionModel]:
    """M-step: fit state k's emission with column k of the responsibilities.

    Args:
        emissions: One emission per state.
        responsibilities: Posterior state probabilities, shape (T, K).
        *data: Fit arguments shared by all emissions.

    Returns:
        The fitted emissions (updated in place).
    """
    gamma = np.asarray(responsibilities, dtype=float)
    if gamma.ndim != 2 or gamma.shape[1] != len(emissions):
        raise InvalidDataError(
            f"responsibilities shape {gamma.shape} does not have {len(emissions)} columns"
        )
    for k, emission in enumerate(emissions):
        emission.fit(*data, w=gamma[:, k])
        logger.debug("M-step updated state %d (weight mass %.4g)", k, np.sum(gamma[:, k]))
    return list(emissions)


def sample_trajectory(
    emissions: Sequence[EmissionModel],
    states: Sequence[int],
    *data,
    rng: Optional[np.random.Generator] = None,
):
    """Simulate observations along a given state path.

    At every time step the accumulated sequence is extended by the emission of
    that step's state.

    Args:
        emissions: One emission per state. All must produce the same kind of
            sequence (same family and dimension).
        states: State index per time step, length T.
        *data: Sampling arguments shared by all emissions (e.g. covariates).
        rng: Random number generator passed to every draw.

    Returns:
        The sequence after T sampling steps.
    """
    sequence = None
    for t, state in enumerate(states):
        if not 0 <= state < len(emissions):
            raise InvalidDataError(f"state {state} at step {t} is out of range")
        sequence = emissions[state].sample(*data, observation_sequence=sequence, rng=rng)
    return sequence

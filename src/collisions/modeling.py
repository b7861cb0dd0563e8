"""
Casualty Model Fitting & Comparison Module
Nested binomial logit models compared with likelihood-ratio (deviance) tests.
Pydantic v2 result models; Tenacity retries non-converged fits with a larger iteration budget.
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from scipy import stats
from statsmodels.tools.sm_exceptions import ConvergenceWarning, PerfectSeparationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from config import settings

RESPONSE = "has_casualty"

BASELINE_TERMS = (
    "involved_motorcycle",
    "involved_non_motor",
    "C(time_of_day)",
    "is_weekend",
    "day_of_year",
)
FACTOR_TERMS = ("failed_to_obey", "was_impaired", "mech_failures", "misc_cause")
INTERACTION_TERMS = ("is_weekend:C(time_of_day)",)

# boolean columns are fed to the design matrix as 0/1
BOOLEAN_COLUMNS = (
    RESPONSE,
    "involved_motorcycle",
    "involved_non_motor",
    "is_weekend",
) + FACTOR_TERMS


class ModelFitError(RuntimeError):
    """A model specification could not be fit; the comparison is aborted."""

    def __init__(self, spec_name: str, reason: str):
        super().__init__(f"{spec_name}: {reason}")
        self.spec_name = spec_name
        self.reason = reason


class ConvergenceFailure(ModelFitError):
    pass


class ModelSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    terms: Tuple[str, ...]

    @property
    def formula(self) -> str:
        return f"{RESPONSE} ~ " + " + ".join(self.terms)


MODEL_SPECS = (
    ModelSpec(name="model_1", terms=BASELINE_TERMS),
    ModelSpec(name="model_2", terms=BASELINE_TERMS + FACTOR_TERMS),
    ModelSpec(name="model_3", terms=BASELINE_TERMS + FACTOR_TERMS + INTERACTION_TERMS),
)


class TermEstimate(BaseModel):
    term: str
    coef: float
    std_err: float
    z: float
    p_value: float
    odds_ratio: float
    ci_lower: float  # odds-ratio scale
    ci_upper: float


class FittedModel(BaseModel):
    """
    Output of one logit fit. The statsmodels result is kept for Reporting
    but excluded from serialization.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    formula: str
    n_obs: int
    n_params: int
    log_likelihood: float
    deviance: float
    aic: float
    bic: float
    converged: bool
    iterations: int
    terms: List[TermEstimate]
    result: Any = Field(default=None, exclude=True, repr=False)

    def term(self, name: str) -> TermEstimate:
        for t in self.terms:
            if t.term == name:
                return t
        raise KeyError(f"{self.name} has no term {name!r}")

    def odds_ratio_table(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "term": t.term,
                    "odds_ratio": t.odds_ratio,
                    "p_value": t.p_value,
                    "ci_lower": t.ci_lower,
                    "ci_upper": t.ci_upper,
                }
                for t in self.terms
            ]
        )


class LikelihoodRatioTest(BaseModel):
    restricted: str
    full: str
    statistic: float
    df: int
    p_value: float
    alpha: float
    significant: bool


class ModelComparison(BaseModel):
    models: List[FittedModel]
    tests: List[LikelihoodRatioTest]
    selected: str
    alpha: float

    @property
    def selected_model(self) -> FittedModel:
        return next(m for m in self.models if m.name == self.selected)


def model_frame(data: pd.DataFrame) -> pd.DataFrame:
    """Copy of the cleaned collision frame with boolean columns as 0/1."""
    frame = data.copy()
    for col in BOOLEAN_COLUMNS:
        frame[col] = frame[col].astype(int)
    frame["time_of_day"] = frame["time_of_day"].astype(str)
    return frame


def _check_full_rank(spec: ModelSpec, model) -> None:
    exog = np.asarray(model.exog)
    rank = np.linalg.matrix_rank(exog)
    if rank < exog.shape[1]:
        raise ModelFitError(
            spec.name, f"design matrix is rank deficient (rank {rank} < {exog.shape[1]} columns)"
        )


def _fit_once(spec: ModelSpec, model, maxiter: int):
    with warnings.catch_warnings():
        # non-convergence is read from mle_retvals below
        warnings.simplefilter("ignore", ConvergenceWarning)
        try:
            result = model.fit(method="newton", maxiter=maxiter, disp=False)
        except (np.linalg.LinAlgError, PerfectSeparationError) as e:
            raise ModelFitError(spec.name, f"singular fit: {e}") from e

    if not result.mle_retvals.get("converged", False):
        raise ConvergenceFailure(spec.name, f"did not converge within {maxiter} iterations")
    return result


def fit_model(
    spec: ModelSpec,
    data: pd.DataFrame,
    maxiter: Optional[int] = None,
    attempts: Optional[int] = None,
    confidence: Optional[float] = None,
) -> FittedModel:
    """
    Fits one binomial logit specification by maximum likelihood.

    A non-converged fit is retried with maxiter scaled by the attempt number;
    after the last attempt the failure is raised.

    :raises ModelFitError: rank-deficient design, singular Hessian or no convergence.
    """
    maxiter = maxiter or settings.FIT_MAXITER
    attempts = attempts or settings.FIT_ATTEMPTS
    confidence = confidence or settings.CONFIDENCE_LEVEL

    model = smf.logit(spec.formula, data=model_frame(data))
    _check_full_rank(spec, model)

    for attempt in Retrying(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(ConvergenceFailure),
        reraise=True,
    ):
        with attempt:
            budget = maxiter * attempt.retry_state.attempt_number
            result = _fit_once(spec, model, budget)

    ci = np.exp(result.conf_int(alpha=1 - confidence))
    terms = [
        TermEstimate(
            term=name,
            coef=float(result.params[name]),
            std_err=float(result.bse[name]),
            z=float(result.tvalues[name]),
            p_value=float(result.pvalues[name]),
            odds_ratio=float(np.exp(result.params[name])),
            ci_lower=float(ci.loc[name, 0]),
            ci_upper=float(ci.loc[name, 1]),
        )
        for name in result.params.index
    ]

    fitted = FittedModel(
        name=spec.name,
        formula=spec.formula,
        n_obs=int(result.nobs),
        n_params=len(result.params),
        log_likelihood=float(result.llf),
        deviance=float(-2.0 * result.llf),
        aic=float(result.aic),
        bic=float(result.bic),
        converged=True,
        iterations=int(result.mle_retvals.get("iterations", 0)),
        terms=terms,
        result=result,
    )
    logger.info(
        f"Fitted {spec.name}: n={fitted.n_obs}, k={fitted.n_params}, deviance={fitted.deviance:.2f}"
    )
    return fitted


def likelihood_ratio_test(
    restricted: FittedModel, full: FittedModel, alpha: Optional[float] = None
) -> LikelihoodRatioTest:
    """Deviance difference, chi-squared with df = parameter-count difference."""
    alpha = alpha or settings.SIGNIFICANCE_LEVEL
    df = full.n_params - restricted.n_params
    if df <= 0:
        raise ValueError(f"{full.name} is not an extension of {restricted.name}")

    # tiny negative differences are numerical noise
    statistic = max(restricted.deviance - full.deviance, 0.0)
    p_value = float(stats.chi2.sf(statistic, df))
    return LikelihoodRatioTest(
        restricted=restricted.name,
        full=full.name,
        statistic=statistic,
        df=df,
        p_value=p_value,
        alpha=alpha,
        significant=p_value < alpha,
    )


def select_model(names: Sequence[str], tests: Sequence[LikelihoodRatioTest]) -> str:
    """
    Sequential selection: step to the larger model only while each test is
    significant; the first non-significant step ends the walk.
    """
    selected = names[0]
    for test in tests:
        if test.restricted != selected or not test.significant:
            break
        selected = test.full
    return selected


def compare_models(
    data: pd.DataFrame,
    specs: Sequence[ModelSpec] = MODEL_SPECS,
    alpha: Optional[float] = None,
    parallel: Optional[bool] = None,
    **fit_kwargs,
) -> ModelComparison:
    """
    Fits every specification (in order, or on a thread pool) and runs the
    likelihood-ratio test between each consecutive pair.

    :raises ModelFitError: any specification failing aborts the whole comparison.
    """
    alpha = alpha or settings.SIGNIFICANCE_LEVEL
    parallel = settings.PARALLEL_FITS if parallel is None else parallel

    try:
        if parallel:
            with ThreadPoolExecutor(max_workers=len(specs)) as pool:
                models = list(pool.map(lambda s: fit_model(s, data, **fit_kwargs), specs))
        else:
            models = [fit_model(s, data, **fit_kwargs) for s in specs]
    except ModelFitError as e:
        logger.error(f"Model comparison aborted, {e.spec_name} failed: {e.reason}")
        raise

    tests = [
        likelihood_ratio_test(restricted, full, alpha)
        for restricted, full in zip(models, models[1:])
    ]
    for t in tests:
        logger.info(
            f"LR test {t.restricted} -> {t.full}: chi2={t.statistic:.3f}, df={t.df}, p={t.p_value:.4g}"
        )

    selected = select_model([m.name for m in models], tests)
    logger.info(f"Selected {selected} (alpha={alpha})")
    return ModelComparison(models=models, tests=tests, selected=selected, alpha=alpha)

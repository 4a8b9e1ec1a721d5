"""
EM backend for Gaussian mean / precision estimation with missing data.

Repeats the precision-parameterized EM cycle (conditional-mean imputation,
corrected sufficient statistics, M-step) until the largest change in the
packed parameters (mu and the upper triangle of K) drops below ``tol``.
With a penalty rho > 0 the M-step estimates K by the graphical lasso
(Städler & Bühlmann, 2012).
"""

import numpy as np

from emgaussian.core.result import Result
from emgaussian.core.compute.timing import Timer
from emgaussian.core.compute.linalg import spd_inverse
from emgaussian.core.exceptions import ValidationError
from emgaussian.emprec.cycle import expected_statistics, run_cycle
from emgaussian.emprec.design import EMDesign
from emgaussian.emprec.likelihood import neg_log_likelihood
from emgaussian.emprec.solution import EMParams, pack_params
from emgaussian.emprec._start import starting_values
from emgaussian.emprec._update import glasso_update, update_moments


class EMPrecisionBackend:
    """
    CPU EM backend under the precision parameterization.

    Parameters
    ----------
    rho : float
        Graphical lasso penalty. 0 gives the unregularized maximum
        likelihood estimate.
    glasso_max_iter, glasso_tol : int, float
        Inner solver settings of the graphical lasso M-step.
    """

    def __init__(
        self,
        rho: float = 0.0,
        *,
        glasso_max_iter: int = 100,
        glasso_tol: float = 1e-6,
    ):
        if rho < 0:
            raise ValueError(f"rho must be non-negative, got {rho}")
        self._rho = float(rho)
        self._glasso_max_iter = glasso_max_iter
        self._glasso_tol = glasso_tol

    @property
    def name(self) -> str:
        return 'cpu_em_glasso' if self._rho > 0 else 'cpu_em_prec'

    def solve(
        self,
        design: EMDesign,
        *,
        start: str = 'diag',
        tol: float = 1e-7,
        max_iter: int = 500,
    ) -> Result[EMParams]:
        """
        Run EM to convergence.

        Parameters
        ----------
        design : EMDesign
            Data design wrapper.
        start : str
            Starting value method: 'diag', 'pairwise', 'listwise' or
            'full' (unregularized EM fit from 'diag').
        tol : float
            EM stops when the maximum absolute parameter change is <= tol.
        max_iter : int
            Maximum EM cycles.

        Returns
        -------
        Result[EMParams]

        Raises
        ------
        NumericalError
            If any cycle meets a singular or non positive-definite matrix.
            No partial estimate is returned.
        ValidationError
            If rho > 0 and the data has a single variable.
        """
        if self._rho > 0 and design.p < 2:
            raise ValidationError(
                f"rho > 0 needs at least 2 variables for the graphical lasso, got {design.p}"
            )

        timer = Timer()
        timer.start()
        warnings_list = []

        # --- Initialization ---
        with timer.section('initialization'):
            if start == 'full':
                full = EMPrecisionBackend().solve(
                    design, start='diag', tol=tol, max_iter=max_iter
                )
                mu, precision = full.params.muhat, full.params.khat
                if not full.params.converged:
                    warnings_list.append(
                        "Unregularized fit used for the 'full' start did not converge"
                    )
            else:
                mu, precision = starting_values(design.data, start)
            sigma = spd_inverse(precision, 'K_start')

        # --- EM iteration ---
        change_history = []
        converged = False
        n_iter = 0
        param_change = float('inf')

        with timer.section('em_iterations'):
            for iteration in range(max_iter):
                theta_old = pack_params(mu, precision)

                mu_new, sigma_new, precision_new = self._cycle(design.data, mu, precision)

                theta_new = pack_params(mu_new, precision_new)
                param_change = float(np.max(np.abs(theta_new - theta_old)))
                change_history.append(param_change)

                mu, sigma, precision = mu_new, sigma_new, precision_new
                n_iter = iteration + 1

                if param_change <= tol:
                    converged = True
                    break

        # --- Observed-data likelihood at the estimate ---
        with timer.section('likelihood'):
            nll = neg_log_likelihood(design.data, mu, precision)

        if not converged:
            warnings_list.append(
                f"EM did not converge after {max_iter} iterations "
                f"(final param change: {param_change:.2e}, tol: {tol:.2e})"
            )

        if design.n_degenerate > 0:
            warnings_list.append(
                f"{design.n_degenerate} rows had no observed values"
            )

        timer.stop()

        params = EMParams(
            muhat=mu,
            sigmahat=sigma,
            khat=precision,
            nll=nll,
            n_iter=n_iter,
            converged=converged,
        )

        return Result(
            params=params,
            info={
                'algorithm': 'em',
                'parameterization': 'precision',
                'start': start,
                'rho': self._rho,
                'tol': tol,
                'max_iter': max_iter,
                'convergence_criterion': 'parameter',
                'final_param_change': param_change,
                'param_change_history': change_history,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _cycle(self, data, mu, precision):
        """One EM cycle; graphical lasso M-step when rho > 0."""
        if self._rho == 0:
            return tuple(run_cycle(data, mu, precision))

        stats = expected_statistics(data, mu, precision)
        mu_new, sigma_new = update_moments(stats.t1, stats.t2, stats.n)
        sigma_new, precision_new = glasso_update(
            sigma_new,
            self._rho,
            max_iter=self._glasso_max_iter,
            tol=self._glasso_tol,
        )
        return mu_new, sigma_new, precision_new

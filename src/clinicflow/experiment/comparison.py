"""Configuration comparison tools with statistical testing.

Runs two clinic configurations over many seeds and tests whether the
differences in their session metrics are significant.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd
from scipy import stats

from clinicflow.core.scenario import ClinicScenario
from clinicflow.experiment.runner import multiple_replications


# Metrics where a larger value is the better outcome
HIGHER_IS_BETTER = frozenset({
    "monitoring_arrivals",
    "throughput_per_hour",
    "treated",
    "nurse_visits",
    "doctor_consults",
})


@dataclass
class ComparisonResult:
    """Result of comparing two configurations.

    Attributes:
        scenario_a_name: Display name for configuration A.
        scenario_b_name: Display name for configuration B.
        metrics: DataFrame with detailed comparison for each metric.
        summary: Plain language summary of the comparison.
    """
    scenario_a_name: str
    scenario_b_name: str
    metrics: pd.DataFrame
    summary: str

    def significant_differences(self, alpha: float = 0.05) -> pd.DataFrame:
        """Return only metrics with significant differences."""
        return self.metrics[self.metrics['p_value'] < alpha]


def _effect_magnitude(d: float) -> str:
    """Interpret Cohen's d effect size."""
    d = abs(d)
    if d < 0.2:
        return "negligible"
    elif d < 0.5:
        return "small"
    elif d < 0.8:
        return "medium"
    else:
        return "large"


def _is_improvement(metric: str, difference: float, higher_is_better: Iterable[str]) -> bool:
    if metric in higher_is_better:
        return difference > 0
    return difference < 0


def _generate_summary(
    df: pd.DataFrame,
    name_a: str,
    name_b: str,
    higher_is_better: Iterable[str],
) -> str:
    """Generate a markdown summary, reading B relative to A."""
    lines = [f"## Comparison: {name_a} vs {name_b}\n"]

    if df.empty:
        lines.append("\nNo metrics compared.\n")
        return "".join(lines)

    better = []
    worse = []
    for _, row in df[df['significant']].iterrows():
        if row['difference'] == 0:
            continue
        if _is_improvement(row['metric'], row['difference'], higher_is_better):
            better.append(row)
        else:
            worse.append(row)

    if better:
        lines.append(f"### Significant Improvements ({name_b} is better):\n")
        for row in better:
            lines.append(
                f"- **{row['metric']}**: {row['pct_difference']:+.1f}% "
                f"({row['effect_magnitude']} effect)\n"
            )

    if worse:
        lines.append(f"\n### Significant Degradations ({name_b} is worse):\n")
        for row in worse:
            lines.append(
                f"- **{row['metric']}**: {row['pct_difference']:+.1f}% "
                f"({row['effect_magnitude']} effect)\n"
            )

    no_change = df[~df['significant']]
    if len(no_change) > 0:
        lines.append("\n### No Significant Change:\n")
        for _, row in no_change.iterrows():
            lines.append(f"- {row['metric']}\n")

    return "".join(lines)


def compare_configurations(
    scenario_a: ClinicScenario,
    scenario_b: ClinicScenario,
    metrics: List[str],
    n_reps: int = 30,
    scenario_a_name: Optional[str] = None,
    scenario_b_name: Optional[str] = None,
    alpha: float = 0.05,
    higher_is_better: Iterable[str] = HIGHER_IS_BETTER,
) -> ComparisonResult:
    """Compare two clinic configurations with statistical testing.

    Runs full sessions of both configurations over ``n_reps`` seeds and
    uses a Mann-Whitney U test per metric.

    Args:
        scenario_a: Baseline configuration (e.g. standard clinic).
        scenario_b: Proposed configuration (e.g. AI clinic).
        metrics: Metric names from the session results.
        n_reps: Replications per configuration.
        scenario_a_name: Display name for A (defaults to scenario name).
        scenario_b_name: Display name for B (defaults to scenario name).
        alpha: Significance level.
        higher_is_better: Metrics where an increase is an improvement.

    Returns:
        ComparisonResult with detailed comparison and plain language summary.
    """
    name_a = scenario_a_name or scenario_a.name
    name_b = scenario_b_name or scenario_b.name
    if name_a == name_b:
        name_a, name_b = f"{name_a} (A)", f"{name_b} (B)"

    results_a = multiple_replications(scenario_a, n_reps=n_reps, metric_names=metrics)
    results_b = multiple_replications(scenario_b, n_reps=n_reps, metric_names=metrics)

    comparison_data = []

    for metric in metrics:
        values_a = results_a.get(metric, [])
        values_b = results_b.get(metric, [])

        # Remove NaNs
        values_a = [v for v in values_a if not np.isnan(v)]
        values_b = [v for v in values_b if not np.isnan(v)]

        if not values_a or not values_b:
            continue

        mean_a = float(np.mean(values_a))
        mean_b = float(np.mean(values_b))
        std_a = float(np.std(values_a, ddof=1)) if len(values_a) > 1 else 0.0
        std_b = float(np.std(values_b, ddof=1)) if len(values_b) > 1 else 0.0

        # Identical samples make the test meaningless
        if values_a == values_b or (std_a == 0 and std_b == 0 and mean_a == mean_b):
            p_value = 1.0
        else:
            try:
                _, p_value = stats.mannwhitneyu(values_a, values_b, alternative='two-sided')
                p_value = float(p_value)
            except ValueError:
                p_value = 1.0

        pooled_std = np.sqrt((std_a**2 + std_b**2) / 2) if (std_a > 0 or std_b > 0) else 1.0
        effect_size = float((mean_b - mean_a) / pooled_std) if pooled_std > 0 else 0.0

        diff = mean_b - mean_a
        pct_diff = (diff / mean_a * 100) if mean_a != 0 else 0.0

        comparison_data.append({
            'metric': metric,
            f'{name_a}_mean': mean_a,
            f'{name_a}_std': std_a,
            f'{name_b}_mean': mean_b,
            f'{name_b}_std': std_b,
            'difference': diff,
            'pct_difference': pct_diff,
            'p_value': p_value,
            'significant': p_value < alpha,
            'effect_size': effect_size,
            'effect_magnitude': _effect_magnitude(effect_size),
        })

    columns = [
        'metric', f'{name_a}_mean', f'{name_a}_std', f'{name_b}_mean', f'{name_b}_std',
        'difference', 'pct_difference', 'p_value', 'significant',
        'effect_size', 'effect_magnitude',
    ]
    df = pd.DataFrame(comparison_data, columns=columns)
    summary = _generate_summary(df, name_a, name_b, higher_is_better)

    return ComparisonResult(
        scenario_a_name=name_a,
        scenario_b_name=name_b,
        metrics=df,
        summary=summary,
    )

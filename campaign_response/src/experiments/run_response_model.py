"""Train, explain and apply the campaign response model end to end.

Protocol
--------
1) Load the labelled primary file and the unlabelled holdout file.
2) Clean each population independently (types, duplicates, dates, mean
   imputation, income IQR filter). Holdout gaps use training means unless
   ``holdout_imputation: own``.
3) Encode categoricals on the primary table; replay the encoding on the holdout.
4) Stratified train/test split of the primary table.
5) Grid-search a gradient-boosted classifier with k-fold CV on ROC AUC.
6) SHAP attributions on the training matrix.
7) ROC / AUC and a metrics table on the test split.
8) Score the holdout and write ``Holdout_Scored.csv``.

Outputs (under ``output_dir``)
------------------------------
- ``Holdout_Scored.csv``
- ``figures/*.png`` (tuning, importance, SHAP summary/dependence, ROC)
- ``tables/cv_results.csv``, ``tables/test_metrics.csv``,
  ``tables/shap_importance.csv``
- ``logs/run.log``

Usage
-----
.. code-block:: bash

    python -m campaign_response.src.experiments.run_response_model \
        --primary data/marketing_campaign.csv --holdout data/holdout.csv
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # headless-safe
import matplotlib.pyplot as plt

import pandas as pd

from campaign_response.src.data.errors import MissingInputError, ResponseDataError
from campaign_response.src.data.features import EncodingSchema, encode_holdout, encode_training
from campaign_response.src.data.load import load_datasets
from campaign_response.src.data.preprocess import CleaningResult, clean_customer_table, split_train_test
from campaign_response.src.evaluation.prediction import RocResult, compute_roc, metrics_report
from campaign_response.src.explain.shap_analysis import ShapAnalysis, compute_shap_values
from campaign_response.src.models.boosting import TunedBoostingModel, fit_boosted_classifier
from campaign_response.src.models.scoring import score_holdout, write_scored_holdout
from campaign_response.src.utils.config import DEFAULT_CONFIG_PATH, PipelineConfig, load_config
from campaign_response.src.utils.logging_utils import configure_logging
from campaign_response.src.utils.seed_utils import set_global_seed
from campaign_response.src.visualization.plots_model import (
    plot_feature_importance,
    plot_roc_curve,
    plot_shap_dependence,
    plot_shap_summary,
    plot_tuning_results,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything a run produced, for inspection in notebooks and tests."""

    primary: CleaningResult
    holdout: CleaningResult
    schema: EncodingSchema
    model: TunedBoostingModel
    shap: ShapAnalysis
    roc: RocResult
    metrics: pd.DataFrame
    scored: pd.DataFrame
    scored_path: Path
    filled_columns: List[str]
    figures: List[Path]


def _save_figure(fig: plt.Figure, path: Path, saved: List[Path]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    saved.append(path)


def _clean(df: pd.DataFrame, cfg: PipelineConfig, *, labelled: bool, means=None) -> CleaningResult:
    return clean_customer_table(
        df,
        categorical_cols=cfg.categorical_cols,
        income_col=cfg.income_col,
        date_col=cfg.date_col,
        response_col=cfg.response_col if labelled else None,
        id_col=cfg.id_col,
        date_format=cfg.date_format,
        strict_dates=cfg.strict_dates,
        reference_date=cfg.reference_date,
        iqr_k=cfg.iqr_k,
        impute_means=means,
    )


def run_pipeline(cfg: PipelineConfig) -> PipelineResult:
    """Run every stage with ``cfg`` and write the artifacts to ``cfg.output_dir``."""
    if cfg.primary_path is None or cfg.holdout_path is None:
        raise MissingInputError(
            "Both primary_path and holdout_path must be set (use --primary and --holdout)."
        )

    set_global_seed(cfg.random_state)
    out_dir = cfg.output_path
    fig_dir = out_dir / "figures"
    table_dir = out_dir / "tables"
    table_dir.mkdir(parents=True, exist_ok=True)
    figures: List[Path] = []

    # 1) Ingestion
    primary_raw, holdout_raw = load_datasets(
        cfg.primary_path,
        cfg.holdout_path,
        primary_required=cfg.required_columns + [cfg.response_col],
        holdout_required=cfg.required_columns,
    )

    # 2) Cleaning, each population on its own
    logger.info("Cleaning primary table (%d rows)", len(primary_raw))
    primary = _clean(primary_raw, cfg, labelled=True)
    logger.info("Cleaning holdout table (%d rows)", len(holdout_raw))
    holdout_means = primary.means if cfg.holdout_imputation == "train" else None
    n_gaps = int(holdout_raw.select_dtypes("number").isna().sum().sum())
    if holdout_means is not None and n_gaps:
        logger.warning(
            "Filling %d missing holdout value(s) with training means, not holdout means "
            "(set holdout_imputation: own for per-population means).",
            n_gaps,
        )
    holdout = _clean(holdout_raw, cfg, labelled=False, means=holdout_means)

    # 3) Encoding
    features, labels, schema = encode_training(primary.frame, cfg.categorical_cols, cfg.response_col)
    holdout_features, filled = encode_holdout(holdout.frame, schema)

    # 4) Split
    x_train, x_test, y_train, y_test = split_train_test(
        features, labels, test_size=cfg.test_size, random_state=cfg.random_state
    )
    logger.info(
        "Split sizes: train=%d, test=%d | positive rate train=%.3f, test=%.3f",
        len(x_train),
        len(x_test),
        float((y_train.astype(str) == schema.positive_label).mean()),
        float((y_test.astype(str) == schema.positive_label).mean()),
    )

    # 5) Training
    model = fit_boosted_classifier(
        x_train,
        y_train,
        cfg.boosting,
        random_state=cfg.random_state,
        positive_label=schema.positive_label,
    )
    model.cv_results.to_csv(table_dir / "cv_results.csv", index=False)
    _save_figure(plot_tuning_results(model.cv_results), fig_dir / "tuning.png", figures)
    _save_figure(plot_feature_importance(model.feature_importance()), fig_dir / "importance.png", figures)

    # 6) Explanation
    analysis = compute_shap_values(model, x_train)
    analysis.importance.to_frame().to_csv(table_dir / "shap_importance.csv", index_label="feature")
    _save_figure(plot_shap_summary(analysis), fig_dir / "shap_summary.png", figures)

    feature, interaction = cfg.shap_pair
    if feature in analysis.values.columns and interaction in analysis.values.columns:
        fig = plot_shap_dependence(analysis, feature, interaction)
        _save_figure(fig, fig_dir / f"shap_dependence_{feature}_{interaction}.png", figures)
    else:
        logger.warning("SHAP pair %s not among model features; skipping pair plot.", cfg.shap_pair)

    for rank, name in enumerate(analysis.top_features(cfg.shap_top_k), start=1):
        fig = plot_shap_dependence(analysis, name, interaction=None)
        _save_figure(fig, fig_dir / f"shap_dependence_top{rank}_{name}.png", figures)

    # 7) Evaluation on the test split
    test_prob = model.predict_positive_proba(x_test)
    roc = compute_roc(y_test, test_prob, positive_label=schema.positive_label)
    logger.info("Test ROC AUC (positive=%s): %.4f", schema.positive_label, roc.auc)
    report = metrics_report(y_test, test_prob, positive_label=schema.positive_label)
    report.to_csv(table_dir / "test_metrics.csv", index=False)
    _save_figure(plot_roc_curve(roc), fig_dir / "roc.png", figures)

    # 8) Holdout scoring
    scored = score_holdout(model, holdout_features, schema)
    scored_path = write_scored_holdout(scored, out_dir / cfg.scored_filename)

    logger.info("Saved %d figures to %s", len(figures), fig_dir)
    return PipelineResult(
        primary=primary,
        holdout=holdout,
        schema=schema,
        model=model,
        shap=analysis,
        roc=roc,
        metrics=report,
        scored=scored,
        scored_path=scored_path,
        filled_columns=filled,
        figures=figures,
    )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train the campaign response model and score the holdout file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"YAML config (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument("--primary", type=str, default=None, help="Labelled primary CSV.")
    parser.add_argument("--holdout", type=str, default=None, help="Unlabelled holdout CSV.")
    parser.add_argument("--output-dir", type=str, default=None, help="Directory for all outputs.")
    parser.add_argument("--random-state", type=int, default=None, help="Seed for split, CV and trees.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    cfg = load_config(args.config)

    overrides = {
        "primary_path": args.primary,
        "holdout_path": args.holdout,
        "output_dir": args.output_dir,
        "random_state": args.random_state,
    }
    cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})

    configure_logging(log_file=cfg.output_path / "logs" / "run.log")

    try:
        result = run_pipeline(cfg)
    except (FileNotFoundError, ResponseDataError) as exc:
        logger.error("%s", exc)
        logger.error(
            "Run `python -m campaign_response.src.data.check_data` to verify the input files.",
        )
        return 1

    logger.info(
        "Done: best params %s, test AUC %.4f, scored file %s",
        result.model.best_params,
        result.roc.auc,
        result.scored_path,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Data Loader

Loads the scored credit dataset and optionally splits it into a stratified
train/holdout pair for evaluating model predictions.
"""

from typing import List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
import logging

import pandas as pd

from risk_binning.core.exceptions import DataReaderError, SchemaValidationError


logger = logging.getLogger(__name__)


@dataclass
class LoadedData:
    """Input table plus the roles of its columns."""
    df: pd.DataFrame
    score_column: str
    target_column: str
    id_columns: List[str] = field(default_factory=list)
    source: str = ""

    @property
    def n_rows(self) -> int:
        return len(self.df)

    @property
    def bad_rate(self) -> float:
        """Share of defaults; non-numeric outcomes are ignored."""
        target = pd.to_numeric(self.df[self.target_column], errors="coerce")
        if target.notna().sum() == 0:
            return float("nan")
        return float(target.mean())


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)


def load_dataset(
    input_path: str,
    score_column: str = "risk_score",
    target_column: str = "default_flag",
    id_columns: Optional[List[str]] = None,
) -> LoadedData:
    """
    Load the input table.

    Args:
        input_path: Path to a CSV (or parquet) file.
        score_column: Continuous risk score column.
        target_column: Binary outcome column (1 = default).
        id_columns: Identifier columns carried through to scored output.
            Listed columns absent from the file are ignored.

    Returns:
        LoadedData with the score column coerced to numeric.
    """
    path = Path(input_path)
    if not path.exists():
        raise DataReaderError(f"Input file not found: {input_path}", source=input_path)

    logger.info(f"DATA | Loading data from {input_path}")
    try:
        df = _read_table(path)
    except Exception as e:
        raise DataReaderError(
            f"Could not read input file: {input_path}", source=input_path, cause=e
        )
    logger.info(f"DATA | Loaded {len(df):,} rows, {len(df.columns):,} columns")

    missing = [c for c in (score_column, target_column) if c not in df.columns]
    if missing:
        raise SchemaValidationError(
            f"Required column(s) not found in data: {missing}",
            missing_columns=missing,
            details={"available_columns": list(df.columns)},
        )

    raw_missing = int(df[score_column].isna().sum())
    df[score_column] = pd.to_numeric(df[score_column], errors="coerce")
    coerced = int(df[score_column].isna().sum()) - raw_missing
    if coerced > 0:
        logger.warning(
            f"DATA | {coerced:,} non-numeric value(s) in '{score_column}' set to missing"
        )

    id_columns = [c for c in (id_columns or []) if c in df.columns]

    loaded = LoadedData(
        df=df,
        score_column=score_column,
        target_column=target_column,
        id_columns=id_columns,
        source=str(input_path),
    )
    logger.info(
        f"DATA | Score missing: {int(df[score_column].isna().sum()):,} rows "
        f"({df[score_column].isna().mean():.2%})"
    )
    return loaded


def split_holdout(
    df: pd.DataFrame,
    target_column: str,
    test_size: float = 0.30,
    random_state: int = 42,
    stratify: bool = True,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split into train/holdout frames.

    ``test_size == 0`` returns the full frame as train and an empty holdout,
    in which case the model is evaluated in-sample only.
    """
    from sklearn.model_selection import train_test_split

    if test_size <= 0:
        return df.reset_index(drop=True), df.iloc[0:0].reset_index(drop=True)

    stratify_on = df[target_column] if stratify else None
    train_df, test_df = train_test_split(
        df,
        test_size=test_size,
        stratify=stratify_on,
        random_state=random_state,
    )
    logger.info(
        f"DATA | Train: {len(train_df):,} rows "
        f"(bad rate: {train_df[target_column].mean():.2%}), "
        f"Holdout: {len(test_df):,} rows "
        f"(bad rate: {test_df[target_column].mean():.2%})"
    )
    return train_df.reset_index(drop=True), test_df.reset_index(drop=True)

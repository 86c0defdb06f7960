from __future__ import annotations

from pathlib import Path

import pandas as pd

from .models import CapsuleSample, LibrarySnapshot


def capsule_frame(snapshot: LibrarySnapshot, sample: CapsuleSample) -> pd.DataFrame:
    """Sampled tracks in sampled order, with their library details."""
    df = snapshot.to_frame().drop_duplicates(subset="uri")
    order = pd.DataFrame({"uri": list(sample.uris), "position": range(len(sample.uris))})
    return order.merge(df, on="uri", how="left")


def export_table(df: pd.DataFrame, out: str) -> str:
    """Write ``df`` as csv or parquet depending on the suffix (parquet by default)."""
    p = Path(out)
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = p.suffix.lower()
    if suffix == ".csv":
        df.to_csv(p, index=False)
        return str(p)
    if suffix not in (".parquet", ".pq"):
        p = p.with_suffix(".parquet")
    df.to_parquet(p, index=False)
    return str(p)

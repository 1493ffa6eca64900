from __future__ import annotations

from typing import Sequence

import numpy as np

from resumefit.core.numeric import clamp01, round_half_up


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either vector has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    na = float(np.linalg.norm(va))
    nb = float(np.linalg.norm(vb))
    if na == 0.0 or nb == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (na * nb))


def clamped_cosine(a: Sequence[float], b: Sequence[float]) -> float:
    # Clamp guards float drift (1.0000000002) and opposed vectors alike.
    return clamp01(cosine(a, b))


def semantic_score(resume_embedding: Sequence[float], jd_embedding: Sequence[float]) -> int:
    return round_half_up(100.0 * clamped_cosine(resume_embedding, jd_embedding))

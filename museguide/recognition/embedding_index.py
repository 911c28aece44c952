"""Mini README: Reference embedding index for the similarity tier.

Structure:
    * SimilarityMatch - best matching item id with its cosine similarity.
    * EmbeddingIndex - per-category nearest-neighbour search over stored
      reference vectors.

Vectors are compared with cosine similarity (1 - cosine distance) using
scikit-learn's ``NearestNeighbors``. One estimator is fitted per category on
first search after a change, so searches are always restricted to the
category chosen by the classifier. Indexes can be saved to and loaded from a
numpy ``.npz`` archive shipped with a museum pack.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import numpy as np
from sklearn.neighbors import NearestNeighbors

from ..catalog import ItemCategory
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SimilarityMatch:
    """Closest reference item and how similar it is."""

    item_id: str
    similarity: float


class EmbeddingIndex:
    """Store reference vectors and answer nearest-item queries per category."""

    def __init__(self) -> None:
        self._ids: Dict[str, List[str]] = {}
        self._vectors: Dict[str, List[np.ndarray]] = {}
        self._fitted: Dict[str, NearestNeighbors] = {}
        self._dimension: Optional[int] = None

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._ids.values())

    def add(self, item_id: str, category: Union[ItemCategory, str], vector: Iterable[float]) -> None:
        """Register a reference vector for ``item_id`` within ``category``."""

        key = _category_key(category)
        array = np.asarray(list(vector), dtype=float)
        if array.ndim != 1 or array.size == 0:
            raise ValueError("Reference embeddings must be non-empty 1-D vectors")
        if not np.any(array):
            raise ValueError(f"Reference embedding for {item_id} is all zeros")
        if self._dimension is None:
            self._dimension = int(array.size)
        elif array.size != self._dimension:
            raise ValueError(
                f"Embedding dimension {array.size} does not match index dimension {self._dimension}"
            )
        self._ids.setdefault(key, []).append(item_id)
        self._vectors.setdefault(key, []).append(array)
        self._fitted.pop(key, None)

    def search(self, vector: Iterable[float], category: Union[ItemCategory, str]) -> Optional[SimilarityMatch]:
        """Return the most similar reference in ``category`` or ``None`` if empty."""

        key = _category_key(category)
        if not self._ids.get(key):
            LOGGER.debug("No reference embeddings for category %s", key)
            return None
        query = np.asarray(list(vector), dtype=float).reshape(1, -1)
        if query.shape[1] != self._dimension:
            raise ValueError(
                f"Query dimension {query.shape[1]} does not match index dimension {self._dimension}"
            )
        if not np.any(query):
            return None
        estimator = self._estimator(key)
        distances, indices = estimator.kneighbors(query, n_neighbors=1)
        similarity = float(np.clip(1.0 - distances[0][0], 0.0, 1.0))
        return SimilarityMatch(item_id=self._ids[key][int(indices[0][0])], similarity=similarity)

    def save(self, path: Union[str, Path]) -> None:
        """Write the index to an ``.npz`` archive."""

        ids: List[str] = []
        categories: List[str] = []
        vectors: List[np.ndarray] = []
        for key, item_ids in self._ids.items():
            ids.extend(item_ids)
            categories.extend([key] * len(item_ids))
            vectors.extend(self._vectors[key])
        np.savez(
            Path(path),
            ids=np.array(ids, dtype=str),
            categories=np.array(categories, dtype=str),
            vectors=np.vstack(vectors) if vectors else np.empty((0, 0)),
        )
        LOGGER.info("Saved %s reference embeddings to %s", len(ids), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "EmbeddingIndex":
        """Read an index previously written by ``save``."""

        index = cls()
        with np.load(Path(path)) as archive:
            for item_id, category, vector in zip(archive["ids"], archive["categories"], archive["vectors"]):
                index.add(str(item_id), str(category), vector)
        LOGGER.info("Loaded %s reference embeddings from %s", len(index), path)
        return index

    def _estimator(self, key: str) -> NearestNeighbors:
        estimator = self._fitted.get(key)
        if estimator is None:
            estimator = NearestNeighbors(n_neighbors=1, metric="cosine")
            estimator.fit(np.vstack(self._vectors[key]))
            self._fitted[key] = estimator
        return estimator


def _category_key(category: Union[ItemCategory, str]) -> str:
    if isinstance(category, ItemCategory):
        return category.value
    return ItemCategory.from_str(category).value

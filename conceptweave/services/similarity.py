"""
Content similarity - ranks a user's Content Items by how close their
embeddings are to a query vector.
"""

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from conceptweave.models.content import ContentItem
from conceptweave.models.results import RelatedContent


class SimilarityService:
    """Cosine similarity over stored Content Item embeddings."""

    @staticmethod
    def compute_batch_similarity(
        query_embedding: list[float], embeddings: list[list[float]]
    ) -> list[float]:
        """
        Compute cosine similarity between a query and multiple embeddings.

        Args:
            query_embedding: Query embedding vector
            embeddings: Embedding vectors of the same dimension

        Returns:
            One score per embedding, in input order
        """
        query_vec = np.array(query_embedding).reshape(1, -1)
        embedding_matrix = np.array(embeddings)

        similarities = cosine_similarity(query_vec, embedding_matrix)[0]

        return similarities.tolist()

    def rank(
        self,
        query_embedding: list[float],
        candidates: list[ContentItem],
        limit: int,
        min_similarity: float = 0.0,
    ) -> list[RelatedContent]:
        """
        Rank candidates by similarity to ``query_embedding``, best first.

        Candidates without an embedding, or embedded with a different
        dimension (another embedding model), are skipped. Ties keep the
        order of ``candidates``.
        """
        comparable = [
            item
            for item in candidates
            if item.embedding and len(item.embedding) == len(query_embedding)
        ]
        if not comparable:
            return []

        scores = self.compute_batch_similarity(
            query_embedding, [item.embedding for item in comparable]
        )
        ranked = sorted(zip(comparable, scores), key=lambda pair: pair[1], reverse=True)

        return [
            RelatedContent(content=item, similarity=float(score))
            for item, score in ranked
            if score >= min_similarity
        ][:limit]

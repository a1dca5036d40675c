"""
ID generation utilities for ConceptWeave.

Provides consistent ID generation for all entity types:
- Content items: cnt_xxx
- Summary records: sum_xxx
- Concept graph nodes: node_xxx
- Connections: conn_xxx
"""

from uuid import uuid4


def generate_content_id() -> str:
    """
    Generate unique Content Item ID.

    Returns:
        ID in format "cnt_xxx" where xxx is 12 hex characters
    """
    return f"cnt_{uuid4().hex[:12]}"


def generate_summary_id() -> str:
    """
    Generate unique Summary Record ID.

    Returns:
        ID in format "sum_xxx" where xxx is 12 hex characters
    """
    return f"sum_{uuid4().hex[:12]}"


def generate_node_id() -> str:
    """
    Generate unique Concept Graph Node ID.

    Returns:
        ID in format "node_xxx" where xxx is 12 hex characters
    """
    return f"node_{uuid4().hex[:12]}"


def generate_connection_id() -> str:
    """Generate unique Connection ID ("conn_" + 12 hex characters)."""
    return f"conn_{uuid4().hex[:12]}"

"""
taskearn: task retrieval, annotation submission and earnings ledger
for a Label Studio-compatible labeling backend.
"""

__version__ = "0.1.0"

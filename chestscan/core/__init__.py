"""
Core analysis layers: ingestion, correlation, triage.
"""

"""
Service layer for business logic.

This package contains the service that orchestrates statement
ingestion: file reading, row normalization, direction
classification, categorization and storage.
"""

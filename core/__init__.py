"""
Core processing modules for the expense tracker.

This package contains:
- config: Application configuration and settings
- db: SQLite transaction store
- direction: Debit/credit classification
- exceptions: Custom exception classes
- logger: Logging configuration
- normalize: Cell value normalization
- parsing: Statement file reading and header location
- schema: Pydantic models and closed category set
"""

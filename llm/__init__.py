"""
LLM integration for expense categorization.

This package contains:
- categorize: Category oracle interface and bounded resolver
- client: Chat completions gateway client wrapper
- prompts: Categorization prompt builder
"""

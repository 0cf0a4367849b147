"""
Core modules for landscaper.

This package contains the core business logic for:
- Configuration management
- Prompt composition
- Model service requests and reply interpretation
- Catalog extraction and error translation
"""

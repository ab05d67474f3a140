"""Core building blocks: logging, errors, HTTP transport and pagination."""

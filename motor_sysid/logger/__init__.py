"""Logging: rotating text logs and JSONL event logs."""

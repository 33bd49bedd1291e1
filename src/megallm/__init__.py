"""MegaLLM model catalog service."""

__project__ = "megallm-catalog"

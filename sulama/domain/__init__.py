"""Business rules without I/O: product matching, classification, pagination, prompts."""

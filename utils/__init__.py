"""Text redaction, rate limiting and the budgeted LLM client."""

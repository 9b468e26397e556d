"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build an analyst prompt from the tools a user wants compared.
- Call the Groq chat API for a written comparison.
- Signal failure with ``None`` so callers can fall back to rule-based output.
"""

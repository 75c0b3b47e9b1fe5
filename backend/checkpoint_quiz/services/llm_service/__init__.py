"""LLM service module.

Provides the language model abstraction layer supporting multiple providers
(Ollama, Google Gemini, NVIDIA).

Key modules:
- llm.py: Provider factory and client creation
- model_client.py: The narrow text-to-text client the quiz pipeline calls
- structured_output.py: JSON extraction from free-form responses
- llm_schemas.py: Pydantic schemas for structured outputs
"""

"""Checkpoint quiz pipeline.

- models.py: Quiz, QuizAttempt and PromptVariant
- response_parser.py: JSON-then-template reading of model output
- validators.py: ordered structural and semantic checks
- generator.py: create_quiz / submit_quiz_answer
- display.py: plain-text rendering
"""

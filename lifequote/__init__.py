"""
Life Insurance Lead Chat Engine

This package powers a conversational life-insurance shopping assistant:
- Fireworks AI for the advisor dialogue
- A rule-based profile extractor and coverage-need calculator
- Mock carrier pricing for term-life quotes
- MongoDB for conversations, quotes, users and leads
"""

__version__ = "1.0.0"

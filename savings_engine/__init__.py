"""
PROCESSING SAVINGS ENGINE
Quotes merchant savings for dual pricing, cash discounting and
supplemental fee programs.
"""

from .models import EngineConfig, ProgramInput, ProgramResult, QuoteRequest
from .processor import QuoteProcessor

__all__ = ['QuoteProcessor', 'EngineConfig', 'ProgramInput', 'ProgramResult', 'QuoteRequest']

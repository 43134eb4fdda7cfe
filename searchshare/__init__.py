"""
SearchShare Metrics & Opportunity Engine

Turns brand-name search volumes and ranked keywords into:
1. Share of Search, Share of Voice and the Growth Gap between them
2. Quick Wins, Hidden Gems, Cannibalization Issues and Content Gaps
3. Category and funnel-stage breakdowns
4. One prioritized, de-duplicated action list
"""

__version__ = "0.1.0"

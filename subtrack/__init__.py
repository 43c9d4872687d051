"""
SubTrack - Source Package

Core engine for tracking recurring subscriptions: cost normalization,
spending statistics and the first-run onboarding flow.

DESIGN PRINCIPLES:
1. The store owns the data, everything else reads it
2. Statistics are derived on every read, never cached
3. Nothing is committed until the user finishes onboarding
4. Persistence failures warn, they never crash
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SubTrack Team"

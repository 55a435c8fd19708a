"""Calendar layer: zones, the calendar instant, and token patterns.

All calendar math is delegated to ``datetime``/``zoneinfo`` and
``python-dateutil``; this layer only adapts them to one immutable value.
"""

"""Entérate backend: community events with Supabase storage and an offline fallback"""

__version__ = "1.0.0"

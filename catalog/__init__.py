"""
Read layer for the medical journal directory.

Dashboard statistics and journal listings over a hosted Supabase store.
"""

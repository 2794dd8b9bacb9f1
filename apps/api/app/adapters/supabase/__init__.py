"""Supabase client wiring."""

from .clients import SupabaseClients, dump_model

__all__ = ["SupabaseClients", "dump_model"]
